"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from protein_tracker.adapters.supabase_identity_provider import (
    SupabaseIdentityProvider,
)
from protein_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from protein_tracker.adapters.supabase_stats_repository import SupabaseStatsRepository
from protein_tracker.adapters.supabase_user_settings_repository import (
    SupabaseUserSettingsRepository,
)
from protein_tracker.config import Settings
from protein_tracker.services.auth import AuthService
from protein_tracker.services.exports import ExportService
from protein_tracker.services.meals import MealService
from protein_tracker.services.stats import StatsService
from protein_tracker.services.user_settings import UserSettingsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    meal_service: MealService
    stats_service: StatsService
    user_settings_service: UserSettingsService
    export_service: ExportService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_settings_service = UserSettingsService(
        repository=SupabaseUserSettingsRepository(supabase_client),
        default_protein_goal=resolved_settings.default_protein_goal,
        default_calorie_goal=resolved_settings.default_calorie_goal,
        default_timezone=resolved_settings.default_timezone,
    )
    stats_service = StatsService(
        repository=SupabaseStatsRepository(supabase_client),
        user_settings_service=user_settings_service,
        max_period_days=resolved_settings.max_period_days,
    )
    export_service = ExportService(
        stats_service=stats_service,
        user_settings_service=user_settings_service,
        max_days=resolved_settings.max_export_days,
    )

    return AppContainer(
        settings=resolved_settings,
        auth_service=AuthService(SupabaseIdentityProvider(supabase_client)),
        meal_service=MealService(
            SupabaseMealRepository(supabase_client), user_settings_service
        ),
        stats_service=stats_service,
        user_settings_service=user_settings_service,
        export_service=export_service,
    )
