"""Token-protected API endpoints for a user's schedule."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from daily_tracker.api.models import (  # noqa: TC001
    AddExerciseRequest,
    CloneTemplateRequest,
    CustomTaskRequest,
    DeleteExerciseRequest,
    LedgerStatusRequest,
    MealCompletionRequest,
    MealPlanRequest,
    MoveExerciseRequest,
    SaveDraftTemplateRequest,
    ScheduleDraftRequest,
    SelectTypeRequest,
    TemplateRequest,
    WaterRequest,
    WorkoutRequest,
    WorkoutStatusRequest,
)
from daily_tracker.domain.ledger import Domain

if TYPE_CHECKING:
    from daily_tracker.containers import AppContainer
    from daily_tracker.domain.stats import StreakSummary
    from daily_tracker.domain.water import WaterIntake
    from daily_tracker.services.drafts import WorkoutDraft


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


router = APIRouter(
    prefix="/users/{user_id}",
    tags=["schedule"],
    dependencies=[Depends(require_token)],
)


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/ledger")
async def list_month(
    user_id: UUID, year: int, month: int, request: Request
) -> dict[str, object]:
    """Return the ledgers of a calendar month."""
    if not 1 <= month <= 12:  # noqa: PLR2004
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
    ledgers = _container(request).stats_service.get_month(user_id, year, month)
    return {"ledgers": [asdict(ledger) for ledger in ledgers]}


@router.get("/ledger/{day}")
async def get_ledger(user_id: UUID, day: date, request: Request) -> dict[str, object]:
    """Return the ledger for a day, or null when nothing is scheduled."""
    ledger = _container(request).ledger_service.get_ledger(user_id, day)
    return {"ledger": asdict(ledger) if ledger else None}


@router.put("/ledger/{day}/status")
async def set_ledger_status(
    user_id: UUID, day: date, payload: LedgerStatusRequest, request: Request
) -> dict[str, object]:
    """Set the overall status of a scheduled day."""
    ledger = _container(request).ledger_service.set_status(
        user_id, day, payload.status
    )
    return {"ledger": asdict(ledger) if ledger else None}


@router.post("/ledger/{day}/tasks")
async def add_custom_task(
    user_id: UUID, day: date, payload: CustomTaskRequest, request: Request
) -> dict[str, object]:
    """Schedule a free-form task that no feature module owns."""
    ledger = _container(request).custom_tasks.add_task(user_id, payload.task_id, day)
    return {"ledger": asdict(ledger) if ledger else None}


@router.delete("/ledger/{day}/tasks/{task_id}")
async def remove_custom_task(
    user_id: UUID, day: date, task_id: str, request: Request
) -> dict[str, object]:
    """Unschedule a free-form task."""
    ledger = _container(request).custom_tasks.remove_task(user_id, task_id, day)
    return {"ledger": asdict(ledger) if ledger else None}


@router.put("/meal-plans/{day}")
async def save_meal_plan(
    user_id: UUID, day: date, payload: MealPlanRequest, request: Request
) -> dict[str, object]:
    """Save a meal plan and sync the meal tags of each saved day."""
    timeslots = {name: slot.to_domain() for name, slot in payload.timeslots.items()}
    results = _container(request).meal_plan_service.save_plan_for_days(
        user_id, day, payload.number_of_days, timeslots
    )
    return {
        "results": [
            {
                "plan": asdict(result.plan),
                "ledger": asdict(result.ledger) if result.ledger else None,
            }
            for result in results
        ]
    }


@router.get("/meal-plans/{day}")
async def get_meal_plan(
    user_id: UUID, day: date, request: Request
) -> dict[str, object]:
    """Return the meal plan for a day."""
    plan = _container(request).meal_plan_service.load_plan(user_id, day)
    return {"plan": asdict(plan) if plan else None}


@router.put("/meal-plans/{day}/timeslots/{timeslot}/completion")
async def set_meal_completion(
    user_id: UUID,
    day: date,
    timeslot: str,
    payload: MealCompletionRequest,
    request: Request,
) -> dict[str, object]:
    """Mark a planned meal as eaten or not."""
    plan = _container(request).meal_plan_service.set_completion(
        user_id, day, timeslot, payload.completed
    )
    if plan is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"plan": asdict(plan)}


@router.get("/workouts/statistics")
async def workout_statistics(
    user_id: UUID, start: date, end: date, request: Request
) -> dict[str, object]:
    """Return workout completion figures for a date range."""
    return _container(request).workout_service.get_statistics(user_id, start, end)


@router.put("/workouts/{day}")
async def schedule_workout(
    user_id: UUID, day: date, payload: WorkoutRequest, request: Request
) -> dict[str, object]:
    """Schedule a workout and sync the gym tag."""
    result = _container(request).workout_service.schedule_workout(
        user_id=user_id,
        day=day,
        name=payload.name,
        workout_type=payload.workout_type,
        exercises=[ex.to_domain() for ex in payload.exercises],
        estimated_duration=payload.estimated_duration,
        notes=payload.notes,
        status=payload.status,
    )
    return {
        "workout": asdict(result.workout),
        "ledger": asdict(result.ledger) if result.ledger else None,
    }


@router.get("/workouts/{day}")
async def get_workout(user_id: UUID, day: date, request: Request) -> dict[str, object]:
    """Return the workout scheduled for a day."""
    workout = _container(request).workout_service.load_workout(user_id, day)
    return {"workout": asdict(workout) if workout else None}


@router.put("/workouts/{day}/status")
async def update_workout_status(
    user_id: UUID, day: date, payload: WorkoutStatusRequest, request: Request
) -> dict[str, object]:
    """Mark a scheduled workout completed or skipped."""
    workout = _container(request).workout_service.update_status(
        user_id, day, payload.status
    )
    if workout is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"workout": asdict(workout)}


@router.get("/water/{day}")
async def get_water(user_id: UUID, day: date, request: Request) -> dict[str, object]:
    """Return the day's water intake."""
    intake = _container(request).water_service.get_intake(user_id, day)
    return {"intake": _intake_payload(intake)}


@router.post("/water/{day}/entries")
async def add_water(
    user_id: UUID, day: date, payload: WaterRequest, request: Request
) -> dict[str, object]:
    """Log a drink and sync the water tag."""
    result = _container(request).water_service.add_intake(
        user_id, day, payload.amount_ml, payload.source
    )
    return {
        "intake": _intake_payload(result.intake),
        "ledger": asdict(result.ledger) if result.ledger else None,
    }


@router.delete("/water/{day}/entries/{entry_id}")
async def remove_water(
    user_id: UUID, day: date, entry_id: str, request: Request
) -> dict[str, object]:
    """Remove a logged drink."""
    result = _container(request).water_service.remove_entry(user_id, day, entry_id)
    return {
        "intake": _intake_payload(result.intake),
        "ledger": asdict(result.ledger) if result.ledger else None,
    }


@router.get("/templates")
async def list_templates(
    user_id: UUID, request: Request, workout_type: str | None = None
) -> dict[str, object]:
    """Return templates, most recently used first."""
    templates = _container(request).template_service.list_for_type(
        user_id, workout_type
    )
    return {"templates": [asdict(template) for template in templates]}


@router.get("/templates/{template_id}")
async def get_template(
    user_id: UUID, template_id: str, request: Request
) -> dict[str, object]:
    """Return a template without changing its recency."""
    template = _container(request).template_service.load(template_id)
    if template is None or template.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"template": asdict(template)}


@router.post("/templates", status_code=status.HTTP_201_CREATED)
async def create_template(
    user_id: UUID, payload: TemplateRequest, request: Request
) -> dict[str, str]:
    """Create a template."""
    template_id = _container(request).template_service.save_or_update(
        user_id, payload.to_domain()
    )
    return {"id": template_id}


@router.put("/templates/{template_id}")
async def update_template(
    user_id: UUID, template_id: str, payload: TemplateRequest, request: Request
) -> dict[str, str]:
    """Overwrite a template and mark it most recently used."""
    saved_id = _container(request).template_service.save_or_update(
        user_id, payload.to_domain(), template_id
    )
    return {"id": saved_id}


@router.post("/templates/{template_id}/clone", status_code=status.HTTP_201_CREATED)
async def clone_template(
    user_id: UUID, template_id: str, payload: CloneTemplateRequest, request: Request
) -> dict[str, str]:
    """Copy a template under a new name."""
    cloned_id = _container(request).template_service.clone(
        template_id, user_id, payload.name
    )
    return {"id": cloned_id}


@router.delete("/templates/{template_id}")
async def delete_template(
    user_id: UUID, template_id: str, request: Request
) -> dict[str, str]:
    """Delete a template owned by the user."""
    _container(request).template_service.delete(template_id, user_id)
    return {"status": "ok"}


@router.get("/draft")
async def get_draft(user_id: UUID, request: Request) -> dict[str, object]:
    """Return the working exercise set."""
    draft = _container(request).draft_service.get_draft(user_id)
    return {"draft": _draft_payload(draft)}


@router.post("/draft/type")
async def select_draft_type(
    user_id: UUID, payload: SelectTypeRequest, request: Request
) -> dict[str, object]:
    """Switch workout type and load its most recently used template."""
    draft = _container(request).draft_service.select_workout_type(
        user_id, payload.workout_type
    )
    return {"draft": _draft_payload(draft)}


@router.post("/draft/template/{template_id}")
async def load_draft_template(
    user_id: UUID, template_id: str, request: Request
) -> dict[str, object]:
    """Replace the working set with a template."""
    draft = _container(request).draft_service.load_template(user_id, template_id)
    if draft is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"draft": _draft_payload(draft)}


@router.post("/draft/exercises")
async def add_draft_exercise(
    user_id: UUID, payload: AddExerciseRequest, request: Request
) -> dict[str, object]:
    """Add an exercise to the working set."""
    draft = _container(request).draft_service.add_exercise(
        user_id, payload.exercise.to_domain(), payload.index
    )
    return {"draft": _draft_payload(draft)}


@router.post("/draft/exercises/move")
async def move_draft_exercise(
    user_id: UUID, payload: MoveExerciseRequest, request: Request
) -> dict[str, object]:
    """Move an exercise one position up or down."""
    draft = _container(request).draft_service.move_exercise(
        user_id, payload.exercise_id, payload.direction
    )
    return {"draft": _draft_payload(draft)}


@router.post("/draft/exercises/delete")
async def delete_draft_exercise(
    user_id: UUID, payload: DeleteExerciseRequest, request: Request
) -> dict[str, object]:
    """Delete an exercise; it can be restored until the undo window closes."""
    service = _container(request).draft_service
    draft = service.get_draft(user_id)
    if payload.index >= len(draft.exercises):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    deleted = service.delete_exercise(user_id, payload.index)
    return {"deleted": asdict(deleted), "draft": _draft_payload(draft)}


@router.post("/draft/undo")
async def undo_draft_delete(user_id: UUID, request: Request) -> dict[str, object]:
    """Restore the last deleted exercise if the undo window is still open."""
    service = _container(request).draft_service
    restored = service.undo_delete(user_id)
    return {
        "restored": asdict(restored) if restored else None,
        "draft": _draft_payload(service.get_draft(user_id)),
    }


@router.post("/draft/save-template")
async def save_draft_template(
    user_id: UUID, payload: SaveDraftTemplateRequest, request: Request
) -> dict[str, str]:
    """Save the working set as a template."""
    template_id = _container(request).draft_service.save_as_template(
        user_id, payload.name, payload.description, payload.update_existing
    )
    return {"id": template_id}


@router.post("/draft/schedule")
async def schedule_draft(
    user_id: UUID, payload: ScheduleDraftRequest, request: Request
) -> dict[str, object]:
    """Schedule the working set as a workout."""
    result = _container(request).draft_service.schedule(
        user_id,
        payload.day,
        payload.name,
        payload.estimated_duration,
        payload.notes,
    )
    return {
        "workout": asdict(result.workout),
        "ledger": asdict(result.ledger) if result.ledger else None,
    }


@router.get("/streaks")
async def get_all_streaks(user_id: UUID, request: Request) -> dict[str, object]:
    """Return streaks for every domain."""
    summaries = _container(request).stats_service.get_all_streaks(user_id)
    return {
        "streaks": {
            domain.value: _streak_payload(summary)
            for domain, summary in summaries.items()
        }
    }


@router.get("/streaks/{domain}")
async def get_streaks(
    user_id: UUID, domain: Domain, request: Request
) -> dict[str, object]:
    """Return streaks and the activity grid for one domain."""
    summary = _container(request).stats_service.get_streaks(user_id, domain)
    return {"streak": _streak_payload(summary)}


def _intake_payload(intake: WaterIntake) -> dict[str, object]:
    return {
        **asdict(intake),
        "total_ml": intake.total_ml,
        "goal_achieved": intake.goal_achieved,
    }


def _streak_payload(summary: StreakSummary) -> dict[str, object]:
    return {**asdict(summary), "month_percentage": summary.month_percentage}


def _draft_payload(draft: WorkoutDraft) -> dict[str, object]:
    pending = draft.edit_buffer.pending
    return {
        "workout_type": draft.workout_type,
        "exercises": [asdict(ex) for ex in draft.exercises],
        "selected_template_id": draft.selected_template.id
        if draft.selected_template
        else None,
        "undo_available": pending is not None,
    }
