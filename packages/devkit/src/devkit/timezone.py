from __future__ import annotations

from datetime import date, datetime, time as dtime, tzinfo
import os
import time
from zoneinfo import ZoneInfo

DEFAULT_ZONE_NAME = "Asia/Kolkata"

_local_zone: ZoneInfo = ZoneInfo(DEFAULT_ZONE_NAME)
_configured = False


def configure_timezone(zone_name: str = DEFAULT_ZONE_NAME) -> None:
    global _configured, _local_zone
    if _configured and _local_zone.key == zone_name:
        return
    _local_zone = ZoneInfo(zone_name)
    os.environ["TZ"] = zone_name
    if hasattr(time, "tzset"):
        time.tzset()
    _configured = True


def local_zone() -> ZoneInfo:
    return _local_zone


def now_local(zone: tzinfo | None = None) -> datetime:
    return datetime.now(zone or _local_zone)


def localize(value: datetime, zone: tzinfo | None = None) -> datetime:
    target = zone or _local_zone
    if value.tzinfo is None:
        return value.replace(tzinfo=target)
    return value.astimezone(target)


def start_of_day(moment: datetime | None = None, zone: tzinfo | None = None) -> datetime:
    current = localize(moment, zone) if moment is not None else now_local(zone)
    return datetime.combine(current.date(), dtime.min, tzinfo=current.tzinfo)


def local_midnight(day: date, zone: tzinfo | None = None) -> datetime:
    return datetime.combine(day, dtime.min, tzinfo=zone or _local_zone)
