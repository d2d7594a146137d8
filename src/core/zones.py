"""Timezone resolution helpers shared by the validator and the time engine."""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tzlocal import get_localzone_name

logger = logging.getLogger(__name__)


def resolve_zone(name: str) -> ZoneInfo:
    """Resolve an IANA identifier into a ZoneInfo.

    Raises ValueError for anything zoneinfo cannot load (unknown names,
    malformed keys, directory names such as "Europe").
    """
    if not isinstance(name, str) or not name.strip():
        raise ValueError(f"Invalid timezone identifier: {name!r}")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ValueError(f"Invalid timezone identifier: {name!r}") from exc


def is_known_zone(name: str) -> bool:
    try:
        resolve_zone(name)
    except ValueError:
        return False
    return True


def system_now() -> datetime:
    """Current instant, timezone-aware."""
    return datetime.now(timezone.utc)


def system_local_zone() -> tzinfo:
    """The viewer's zone: LOCAL_TIMEZONE when configured, else the system zone.

    The system zone is looked up by IANA name so daylight-saving changes
    between now and a friend's midnight are honoured. A fixed offset is only
    used when no name can be detected.
    """
    from src.config import settings

    if settings.LOCAL_TIMEZONE:
        return resolve_zone(settings.LOCAL_TIMEZONE)

    try:
        name = get_localzone_name()
    except (LookupError, ValueError, OSError) as exc:
        logger.warning("Could not detect the local timezone name: %s", exc)
        name = None

    if name:
        try:
            return resolve_zone(name)
        except ValueError as exc:
            logger.warning("Local timezone %r is not loadable: %s", name, exc)

    tz = datetime.now().astimezone().tzinfo
    if tz is None:
        logger.warning("Could not detect the local timezone, using UTC")
        return timezone.utc
    logger.warning("Using a fixed UTC offset for the local timezone")
    return tz
