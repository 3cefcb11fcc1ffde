"""Tests for workout template service."""

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from daily_tracker.domain.errors import TemplateNotFound
from daily_tracker.domain.workouts import (
    TemplateInput,
    WorkoutExercise,
    WorkoutTemplate,
)
from daily_tracker.services.templates import TemplateService
from tests.conftest import InMemoryTemplateRepository

BASE = datetime(2024, 3, 1, 12, tzinfo=UTC)
SQUAT = WorkoutExercise(id="row-1", exercise_id="squat", name="Squat")
PRESS = WorkoutExercise(id="row-2", exercise_id="press", name="Press")


def _template(
    template_id: str,
    user_id: UUID,
    last_used: datetime,
    workout_type: str = "Lower A",
    exercises: tuple[WorkoutExercise, ...] = (SQUAT,),
) -> WorkoutTemplate:
    return WorkoutTemplate(
        id=template_id,
        user_id=user_id,
        name=template_id.upper(),
        workout_type=workout_type,
        exercises=exercises,
        created_at=BASE,
        last_used=last_used,
    )


def test_most_recently_used_template_is_selected() -> None:
    user_id = uuid4()
    repository = InMemoryTemplateRepository()
    for name, offset in (("t1", 1), ("t3", 3), ("t2", 2)):
        repository.save_template(
            _template(name, user_id, BASE + timedelta(days=offset))
        )
    repository.save_template(
        _template("other", user_id, BASE + timedelta(days=9), workout_type="Upper A")
    )
    service = TemplateService(repository)

    ranked = service.list_for_type(user_id, "Lower A")
    selection = service.select_for_type(user_id, "Lower A")

    assert [template.id for template in ranked] == ["t3", "t2", "t1"]
    assert selection.template is not None
    assert selection.template.id == "t3"
    assert selection.exercises == [SQUAT]


def test_equal_last_used_is_ordered_by_id() -> None:
    user_id = uuid4()
    repository = InMemoryTemplateRepository()
    repository.save_template(_template("b", user_id, BASE))
    repository.save_template(_template("a", user_id, BASE))

    ranked = TemplateService(repository).list_for_type(user_id, "Lower A")

    assert [template.id for template in ranked] == ["a", "b"]


def test_no_templates_gives_empty_selection() -> None:
    selection = TemplateService(InMemoryTemplateRepository()).select_for_type(
        uuid4(), "Upper B"
    )

    assert selection.template is None
    assert selection.exercises == []


def test_load_does_not_change_recency() -> None:
    user_id = uuid4()
    repository = InMemoryTemplateRepository()
    repository.save_template(_template("t1", user_id, BASE))
    service = TemplateService(repository)

    loaded = service.load("t1")

    assert loaded is not None
    assert repository.templates["t1"].last_used == BASE
    assert service.load("missing") is None


def test_update_bumps_recency_and_keeps_created_at() -> None:
    user_id = uuid4()
    repository = InMemoryTemplateRepository()
    repository.save_template(_template("t1", user_id, BASE))
    repository.save_template(_template("t2", user_id, BASE + timedelta(days=1)))
    service = TemplateService(repository)

    saved_id = service.save_or_update(
        user_id,
        TemplateInput(name="Heavy", workout_type="Lower A", exercises=(PRESS,)),
        existing_id="t1",
    )

    updated = repository.templates["t1"]
    assert saved_id == "t1"
    assert updated.name == "Heavy"
    assert updated.exercises == (PRESS,)
    assert updated.created_at == BASE
    assert updated.last_used > BASE + timedelta(days=1)
    assert service.select_for_type(user_id, "Lower A").template == updated


def test_create_sets_created_and_last_used() -> None:
    user_id = uuid4()
    repository = InMemoryTemplateRepository()
    service = TemplateService(repository)

    template_id = service.save_or_update(
        user_id,
        TemplateInput(name="New", workout_type="Upper A", exercises=(SQUAT,)),
    )

    created = repository.templates[template_id]
    assert template_id.startswith("template_")
    assert created.created_at == created.last_used
    assert created.user_id == user_id


def test_update_of_foreign_template_is_rejected() -> None:
    owner = uuid4()
    repository = InMemoryTemplateRepository()
    repository.save_template(_template("t1", owner, BASE))
    service = TemplateService(repository)
    content = TemplateInput(name="Mine", workout_type="Lower A", exercises=())

    with pytest.raises(TemplateNotFound):
        service.save_or_update(uuid4(), content, existing_id="t1")
    with pytest.raises(TemplateNotFound):
        service.save_or_update(owner, content, existing_id="missing")

    assert repository.templates["t1"].name == "T1"


def test_delete_checks_ownership() -> None:
    owner = uuid4()
    repository = InMemoryTemplateRepository()
    repository.save_template(_template("t1", owner, BASE))
    service = TemplateService(repository)

    with pytest.raises(TemplateNotFound):
        service.delete("t1", uuid4())
    assert "t1" in repository.templates

    service.delete("t1", owner)
    assert "t1" not in repository.templates


def test_clone_copies_exercises_under_new_name() -> None:
    user_id = uuid4()
    repository = InMemoryTemplateRepository()
    repository.save_template(_template("t1", user_id, BASE, exercises=(SQUAT, PRESS)))
    service = TemplateService(repository)

    clone_id = service.clone("t1", user_id, "Copy")

    clone = repository.templates[clone_id]
    assert clone_id != "t1"
    assert clone.name == "Copy"
    assert clone.exercises == (SQUAT, PRESS)
    assert clone.description == "Cloned from: T1"
    with pytest.raises(TemplateNotFound):
        service.clone("missing", user_id, "Copy")


def test_clone_of_foreign_template_is_rejected() -> None:
    owner = uuid4()
    repository = InMemoryTemplateRepository()
    repository.save_template(_template("t1", owner, BASE, exercises=(SQUAT,)))
    service = TemplateService(repository)

    with pytest.raises(TemplateNotFound):
        service.clone("t1", uuid4(), "Stolen")

    assert list(repository.templates) == ["t1"]
