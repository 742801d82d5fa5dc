"""FastAPI application factory."""

import logging
from datetime import date, datetime
from typing import Literal

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from protein_tracker.api.auth import require_principal
from protein_tracker.api.models import (
    DailyBucketResponse,
    DeletionResponse,
    GoalsResponse,
    GoalsUpdate,
    InsightsResponse,
    MealResponse,
    PeriodSummaryResponse,
    StreaksResponse,
)
from protein_tracker.app_logging import configure_logging
from protein_tracker.config import parse_cors_origins
from protein_tracker.containers import AppContainer
from protein_tracker.domain.dates import InvalidPeriodError
from protein_tracker.domain.meals import MealRecord
from protein_tracker.domain.models import Principal
from protein_tracker.services.exports import ExportOptions


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    origins = parse_cors_origins(container.settings.cors_origins)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(InvalidPeriodError)
    async def invalid_period(_: Request, exc: InvalidPeriodError) -> JSONResponse:
        logger.info("Rejected period request: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/summaries/weekly")
    async def weekly_summaries(
        request: Request,
        weeks: int = Query(default=4, ge=0, le=52),
        principal: Principal = Depends(require_principal),
    ) -> list[PeriodSummaryResponse]:
        """Return weekly summaries, oldest first."""
        state_container: AppContainer = request.app.state.container
        summaries = state_container.stats_service.get_weekly(principal.id, weeks)
        return [PeriodSummaryResponse.model_validate(item) for item in summaries]

    @app.get("/summaries/monthly")
    async def monthly_summaries(
        request: Request,
        months: int = Query(default=3, ge=0, le=24),
        principal: Principal = Depends(require_principal),
    ) -> list[PeriodSummaryResponse]:
        """Return monthly summaries, oldest first."""
        state_container: AppContainer = request.app.state.container
        summaries = state_container.stats_service.get_monthly(principal.id, months)
        return [PeriodSummaryResponse.model_validate(item) for item in summaries]

    @app.get("/summaries/period")
    async def period_summary(
        request: Request,
        start: date,
        end: date,
        label: str | None = None,
        principal: Principal = Depends(require_principal),
    ) -> PeriodSummaryResponse:
        """Return the summary of an inclusive date range."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.stats_service.get_period(
            principal.id, start, end, label
        )
        return PeriodSummaryResponse.model_validate(summary)

    @app.get("/summaries/insights")
    async def insights(
        request: Request,
        period: Literal["week", "month"] = "week",
        count: int = Query(default=2, ge=0, le=52),
        principal: Principal = Depends(require_principal),
    ) -> InsightsResponse:
        """Return achievements, improvements and trends."""
        state_container: AppContainer = request.app.state.container
        result = state_container.stats_service.get_insights(
            principal.id, period, count
        )
        return InsightsResponse.model_validate(result)

    @app.get("/summaries/streaks")
    async def streaks(
        request: Request,
        days: int = Query(default=60, ge=1, le=366),
        principal: Principal = Depends(require_principal),
    ) -> StreaksResponse:
        """Return the current and best protein goal streaks."""
        state_container: AppContainer = request.app.state.container
        result = state_container.stats_service.get_streaks(principal.id, days)
        return StreaksResponse.model_validate(result)

    @app.get("/summaries/daily")
    async def daily(
        request: Request,
        days: int = Query(default=7, ge=0, le=366),
        principal: Principal = Depends(require_principal),
    ) -> list[DailyBucketResponse]:
        """Return zero-filled daily totals, oldest first."""
        state_container: AppContainer = request.app.state.container
        buckets = state_container.stats_service.get_daily_series(principal.id, days)
        return [DailyBucketResponse.model_validate(item) for item in buckets]

    @app.get("/meals")
    async def list_meals(
        request: Request,
        limit: int = Query(default=50, ge=1, le=500),
        principal: Principal = Depends(require_principal),
    ) -> list[MealResponse]:
        """Return recent meals, newest first."""
        state_container: AppContainer = request.app.state.container
        meals = state_container.meal_service.list_meals(principal.id, limit)
        return [MealResponse.model_validate(meal) for meal in meals]

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    async def log_meal(
        meal: MealRecord,
        request: Request,
        logged_at: datetime | None = None,
        principal: Principal = Depends(require_principal),
    ) -> MealResponse:
        """Record a meal for the current user."""
        state_container: AppContainer = request.app.state.container
        saved = state_container.meal_service.log_meal(principal.id, meal, logged_at)
        return MealResponse.model_validate(saved)

    @app.delete("/meals")
    async def delete_all_meals(
        request: Request, principal: Principal = Depends(require_principal)
    ) -> DeletionResponse:
        """Delete the user's whole meal history."""
        state_container: AppContainer = request.app.state.container
        count = state_container.meal_service.delete_all_meals(principal.id)
        return DeletionResponse(deleted=count)

    @app.get("/meals/{meal_id}")
    async def get_meal(
        meal_id: str,
        request: Request,
        principal: Principal = Depends(require_principal),
    ) -> MealResponse:
        state_container: AppContainer = request.app.state.container
        meal = state_container.meal_service.get_meal(principal.id, meal_id)
        if meal is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return MealResponse.model_validate(meal)

    @app.delete("/meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_meal(
        meal_id: str,
        request: Request,
        principal: Principal = Depends(require_principal),
    ) -> Response:
        state_container: AppContainer = request.app.state.container
        if not state_container.meal_service.delete_meal(principal.id, meal_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/settings/goals")
    async def get_goals(
        request: Request, principal: Principal = Depends(require_principal)
    ) -> GoalsResponse:
        """Return the user's daily goals and timezone."""
        state_container: AppContainer = request.app.state.container
        goals = state_container.user_settings_service.get_goals(principal.id)
        return GoalsResponse.model_validate(goals)

    @app.put("/settings/goals")
    async def update_goals(
        update: GoalsUpdate,
        request: Request,
        principal: Principal = Depends(require_principal),
    ) -> GoalsResponse:
        """Update any of the user's goals or timezone."""
        state_container: AppContainer = request.app.state.container
        try:
            goals = state_container.user_settings_service.set_goals(
                principal.id,
                protein_goal=update.protein_goal,
                calorie_goal=update.calorie_goal,
                timezone=update.timezone,
            )
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return GoalsResponse.model_validate(goals)

    @app.get("/export")
    async def export(  # noqa: PLR0913
        request: Request,
        start: date,
        end: date,
        format: Literal["csv", "html"] = "csv",  # noqa: A002
        include_meals: bool = True,
        include_summary: bool = True,
        include_personal_info: bool = True,
        principal: Principal = Depends(require_principal),
    ) -> Response:
        """Return the user's data as a CSV or HTML download."""
        state_container: AppContainer = request.app.state.container
        document = state_container.export_service.export(
            principal,
            ExportOptions(
                start=start,
                end=end,
                format=format,
                include_meals=include_meals,
                include_summary=include_summary,
                include_personal_info=include_personal_info,
            ),
        )
        return Response(
            content=document.content,
            media_type=document.media_type,
            headers={
                "Content-Disposition": f'attachment; filename="{document.filename}"'
            },
        )

    return app
