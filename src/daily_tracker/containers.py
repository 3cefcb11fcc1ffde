"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from daily_tracker.adapters.supabase_ledger_repository import SupabaseLedgerRepository
from daily_tracker.adapters.supabase_meal_plan_repository import (
    SupabaseMealPlanRepository,
)
from daily_tracker.adapters.supabase_template_repository import (
    SupabaseTemplateRepository,
)
from daily_tracker.adapters.supabase_water_repository import SupabaseWaterRepository
from daily_tracker.adapters.supabase_workout_repository import (
    SupabaseWorkoutRepository,
)
from daily_tracker.config import Settings
from daily_tracker.domain.ledger import Domain
from daily_tracker.services.drafts import DraftService
from daily_tracker.services.ledger import DomainWriteAdapter, LedgerService
from daily_tracker.services.meal_plans import MealPlanService
from daily_tracker.services.stats import StatsService
from daily_tracker.services.templates import TemplateService
from daily_tracker.services.water import WaterService
from daily_tracker.services.workouts import WorkoutService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    ledger_service: LedgerService
    meal_plan_service: MealPlanService
    workout_service: WorkoutService
    water_service: WaterService
    template_service: TemplateService
    custom_tasks: DomainWriteAdapter
    draft_service: DraftService
    stats_service: StatsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    ledger_service = LedgerService(
        SupabaseLedgerRepository(supabase_client),
        max_attempts=resolved_settings.ledger_max_attempts,
    )
    meal_plan_service = MealPlanService(
        repository=SupabaseMealPlanRepository(supabase_client),
        ledger_adapter=DomainWriteAdapter(Domain.MEAL, ledger_service),
    )
    workout_service = WorkoutService(
        repository=SupabaseWorkoutRepository(supabase_client),
        ledger_adapter=DomainWriteAdapter(Domain.GYM, ledger_service),
    )
    water_service = WaterService(
        repository=SupabaseWaterRepository(supabase_client),
        ledger_adapter=DomainWriteAdapter(Domain.WATER, ledger_service),
        daily_target_ml=resolved_settings.water_daily_target_ml,
    )
    template_service = TemplateService(SupabaseTemplateRepository(supabase_client))
    draft_service = DraftService(
        template_service=template_service,
        workout_service=workout_service,
        undo_window_seconds=resolved_settings.undo_window_seconds,
    )
    stats_service = StatsService(
        ledger_service, window_days=resolved_settings.streak_window_days
    )

    async def close_resources() -> None:
        draft_service.clear()

    return AppContainer(
        settings=resolved_settings,
        ledger_service=ledger_service,
        meal_plan_service=meal_plan_service,
        workout_service=workout_service,
        water_service=water_service,
        template_service=template_service,
        custom_tasks=DomainWriteAdapter(Domain.CUSTOM, ledger_service),
        draft_service=draft_service,
        stats_service=stats_service,
        close_resources=close_resources,
    )
