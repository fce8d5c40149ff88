from tasktracker.config import Settings


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./env.db")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")

    s = Settings()
    assert s.database_url == "sqlite+aiosqlite:///./env.db"
    assert s.port == 8080
    assert s.db_pool_size == 10
    assert s.cors_origin_list == ["http://a.test", "http://b.test"]
