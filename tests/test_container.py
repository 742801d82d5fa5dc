"""Tests for container wiring."""

from protein_tracker.config import parse_cors_origins
from protein_tracker.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.stats_service is not None
    assert container.export_service.max_days == settings.max_export_days
    assert container.stats_service.max_period_days == settings.max_period_days
    assert container.meal_service.user_settings_service is (
        container.user_settings_service
    )
    assert container.user_settings_service.default_protein_goal == 120


def test_parse_cors_origins() -> None:
    assert parse_cors_origins(None) == []
    assert parse_cors_origins(" * ") == ["*"]
    assert parse_cors_origins("https://a.test, ,https://b.test") == [
        "https://a.test",
        "https://b.test",
    ]
