"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from meal_planner.api.fridge import router as fridge_router
from meal_planner.api.meal_plans import router as meal_plans_router
from meal_planner.api.shopping import router as shopping_router
from meal_planner.app_logging import configure_logging
from meal_planner.containers import AppContainer
from meal_planner.domain.errors import (
    DataIntegrityError,
    InvalidInputError,
    MealPlannerError,
    NotFoundError,
)

_STATUS_BY_ERROR: dict[type[MealPlannerError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    DataIntegrityError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Meal Planner")
    app.state.container = container

    app.include_router(meal_plans_router)
    app.include_router(shopping_router)
    app.include_router(fridge_router)

    @app.exception_handler(MealPlannerError)
    async def handle_domain_error(
        request: Request, exc: MealPlannerError
    ) -> JSONResponse:
        status_code = _STATUS_BY_ERROR.get(
            type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "Request failed",
                extra={"path": request.url.path, "error": exc.code},
            )
        return _error_response(status_code, exc.code, str(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            InvalidInputError.code,
            "; ".join(messages),
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"error": code, "message": message}
    )
