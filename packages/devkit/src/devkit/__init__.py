"""Common runtime devkit for configuration, logging and time handling."""

from devkit.config import CampSettings, load_settings
from devkit.observability import ExtraFieldsFormatter, configure_logging, configure_otel
from devkit.timezone import (
    DEFAULT_ZONE_NAME,
    configure_timezone,
    local_midnight,
    local_zone,
    localize,
    now_local,
    start_of_day,
)

__all__ = [
    "CampSettings",
    "DEFAULT_ZONE_NAME",
    "ExtraFieldsFormatter",
    "configure_logging",
    "configure_otel",
    "configure_timezone",
    "load_settings",
    "local_midnight",
    "local_zone",
    "localize",
    "now_local",
    "start_of_day",
]
