"""Tests for settings loading"""

from dotenv import load_dotenv

from sauna_booking.config import Settings


def test_dotenv_values_reach_settings(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "DATABASE_URL=postgresql+asyncpg://ops:pw@db:5432/ops\n"
        "BOOKING_TIMEZONE=Europe/Dublin\n"
    )
    monkeypatch.setenv("DATABASE_URL", "placeholder")
    monkeypatch.setenv("BOOKING_TIMEZONE", "placeholder")

    load_dotenv(env_file, override=True)
    settings = Settings(_env_file=None)

    assert settings.database_url == "postgresql+asyncpg://ops:pw@db:5432/ops"
    assert settings.booking_timezone == "Europe/Dublin"


def test_cors_origins_list():
    settings = Settings(_env_file=None, cors_origins=" https://a.example, ,https://b.example ")

    assert settings.cors_origins_list == ["https://a.example", "https://b.example"]
