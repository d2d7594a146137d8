"""
Friends Midnight — Entry Point.

Single entry point: `python main.py` starts the console countdown.
"""

import logging

from src.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from src.console import main

if __name__ == "__main__":
    main()
