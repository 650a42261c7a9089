from devkit.config import load_settings


def test_load_settings_reads_env(monkeypatch) -> None:
    monkeypatch.setenv("CAMP_STORE_BASE_URL", "https://store.example.com")
    monkeypatch.setenv("CAMP_STORE_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("CAMP_LOCATIONS", "Chennai, Madurai,,")
    settings = load_settings("camp-job")

    assert settings.SERVICE_NAME == "camp-job"
    assert settings.CAMP_STORE_BASE_URL == "https://store.example.com"
    assert settings.CAMP_STORE_TIMEOUT_SECONDS == 2.5
    assert settings.selected_locations() == frozenset({"Chennai", "Madurai"})


def test_load_settings_defaults(monkeypatch) -> None:
    monkeypatch.delenv("CAMP_SORT_BY", raising=False)
    monkeypatch.delenv("CAMP_ZERO_RATING_POLICY", raising=False)
    settings = load_settings("camp-job")

    assert settings.CAMP_SORT_BY == "date"
    assert settings.CAMP_ZERO_RATING_POLICY == "include"
    assert settings.selected_locations() == frozenset()
