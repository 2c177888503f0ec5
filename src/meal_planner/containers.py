"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from meal_planner.adapters.supabase_fridge_repository import SupabaseFridgeRepository
from meal_planner.adapters.supabase_meal_calendar_repository import (
    SupabaseMealCalendarRepository,
)
from meal_planner.adapters.supabase_recipe_catalog import SupabaseRecipeCatalog
from meal_planner.config import Settings
from meal_planner.services.calendar import MealCalendarService
from meal_planner.services.fridge import FridgeService
from meal_planner.services.matching import RecipeMatcher
from meal_planner.services.shopping import ShoppingListService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    calendar_service: MealCalendarService
    shopping_list_service: ShoppingListService
    fridge_service: FridgeService
    recipe_matcher: RecipeMatcher


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog = SupabaseRecipeCatalog(supabase_client)
    calendar_repository = SupabaseMealCalendarRepository(supabase_client)
    fridge_repository = SupabaseFridgeRepository(supabase_client)

    fridge_service = FridgeService(
        repository=fridge_repository,
        catalog=catalog,
        expiring_soon_days=resolved_settings.expiring_soon_days,
    )
    return AppContainer(
        settings=resolved_settings,
        calendar_service=MealCalendarService(
            repository=calendar_repository, catalog=catalog
        ),
        shopping_list_service=ShoppingListService(
            repository=calendar_repository,
            catalog=catalog,
            max_nested_depth=resolved_settings.max_nested_recipe_depth,
        ),
        fridge_service=fridge_service,
        recipe_matcher=RecipeMatcher(fridge_service=fridge_service, catalog=catalog),
    )
