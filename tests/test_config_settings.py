"""Settings loading from the environment."""

from inventory_client.config import Settings, get_settings


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)  # keep a developer .env out of the way
    for var in ("INVENTORY_API_BASE_URL", "INVENTORY_PAGE_SIZE", "INVENTORY_SEARCH_DEBOUNCE_MS"):
        monkeypatch.delenv(var, raising=False)
    s = Settings(_env_file=None)
    assert s.api_base_url == "http://localhost:3000"
    assert s.page_size == 20
    assert s.search_debounce_seconds == 0.5
    assert s.identity_token == ""


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("INVENTORY_API_BASE_URL", "https://api.bodega.test")
    monkeypatch.setenv("INVENTORY_PAGE_SIZE", "50")
    monkeypatch.setenv("INVENTORY_SEARCH_DEBOUNCE_MS", "250")
    s = Settings(_env_file=None)
    assert s.api_base_url == "https://api.bodega.test"
    assert s.page_size == 50
    assert s.search_debounce_seconds == 0.25


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
