from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from devkit.timezone import DEFAULT_ZONE_NAME, configure_timezone


class CampSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    SERVICE_NAME: str = "camp-discovery"
    CAMP_STORE_BASE_URL: str | None = None
    CAMP_STORE_API_TOKEN: str | None = None
    CAMP_STORE_TIMEOUT_SECONDS: float = 5.0
    CAMP_TIMEZONE: str = DEFAULT_ZONE_NAME
    CAMP_ZERO_RATING_POLICY: str = "include"
    CAMP_LOG_LEVEL: str = "INFO"
    CAMP_USER_UID: str | None = None
    CAMP_SEARCH_QUERY: str = ""
    CAMP_SORT_BY: str = "date"
    CAMP_LOCATIONS: str = ""
    CAMP_DATE_FROM: str | None = None
    CAMP_DATE_TO: str | None = None

    def selected_locations(self) -> frozenset[str]:
        return frozenset(item.strip() for item in self.CAMP_LOCATIONS.split(",") if item.strip())


def load_settings(service_name: str) -> CampSettings:
    settings = CampSettings(SERVICE_NAME=service_name)
    configure_timezone(settings.CAMP_TIMEZONE)
    return settings
