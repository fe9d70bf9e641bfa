"""Workout session state machine and personal record detection."""
import enum
import logging
import uuid
from datetime import datetime
from typing import Callable, Optional, Any

from pydantic import ValidationError as PydanticValidationError

from fitcore.errors import ValidationError, SessionStateError
from fitcore.schemas.workout import (
    WorkoutPlan,
    WorkoutSession,
    WorkoutExercise,
    SetLog,
    PersonalRecord,
    WorkoutSummary,
)
from fitcore.services.store import EntityStore

logger = logging.getLogger(__name__)

SET_FIELDS = ("weight", "reps")


class SessionState(str, enum.Enum):
    """Workout machine state."""
    IDLE = "idle"
    ACTIVE = "active"


def session_volume(session: WorkoutSession) -> float:
    """Sum of weight x reps over every set of the session."""
    return sum(s.weight * s.reps for ex in session.exercises for s in ex.sets)


def _check_index(index: int, size: int, what: str) -> None:
    if not 0 <= index < size:
        raise IndexError(f"{what} index {index} out of range (0..{size - 1})")


class WorkoutSessionMachine:
    """
    Runs one workout at a time.

    The in-progress session is held here, outside the session history, and
    is the only mutable workout state. ``finish`` moves a copy of it into the
    history and updates personal records in a single replace.
    """

    def __init__(
        self,
        store: EntityStore,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.clock = clock
        self._active: Optional[WorkoutSession] = None

    @property
    def state(self) -> SessionState:
        return SessionState.IDLE if self._active is None else SessionState.ACTIVE

    @property
    def active_session(self) -> Optional[WorkoutSession]:
        return self._active

    def _require_active(self) -> WorkoutSession:
        if self._active is None:
            raise SessionStateError("No active workout session")
        return self._active

    def _exercise(self, exercise_index: int) -> WorkoutExercise:
        session = self._require_active()
        _check_index(exercise_index, len(session.exercises), "Exercise")
        return session.exercises[exercise_index]

    def start(self, plan: WorkoutPlan) -> WorkoutSession:
        """
        Start a session from a plan.

        Each exercise id in the plan becomes its own slot with one empty set.

        Raises:
            ValidationError: Plan has no exercises
            SessionStateError: A session is already active
        """
        if self._active is not None:
            raise SessionStateError("A workout session is already active")
        if not plan.exercise_ids:
            raise ValidationError("Plan has no exercises")

        self._active = WorkoutSession(
            id=uuid.uuid4().hex,
            plan_id=plan.id,
            name=plan.name,
            date=self.clock(),
            exercises=[
                WorkoutExercise(
                    id=uuid.uuid4().hex,
                    exercise_id=exercise_id,
                    sets=[SetLog(weight=0, reps=0)],
                )
                for exercise_id in plan.exercise_ids
            ],
        )
        logger.info(f"Started session {self._active.id} from plan '{plan.name}'")
        return self._active

    def update_set(self, exercise_index: int, set_index: int, field: str, value: Any) -> SetLog:
        """Write ``weight`` or ``reps`` of one set in place."""
        exercise = self._exercise(exercise_index)
        _check_index(set_index, len(exercise.sets), "Set")
        if field not in SET_FIELDS:
            raise ValidationError(f"Unknown set field: {field}")

        set_log = exercise.sets[set_index]
        try:
            setattr(set_log, field, value)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid {field}: {value!r}") from e
        return set_log

    def add_set(self, exercise_index: int) -> SetLog:
        """Append an empty set to an exercise."""
        exercise = self._exercise(exercise_index)
        set_log = SetLog(weight=0, reps=0)
        exercise.sets.append(set_log)
        return set_log

    def remove_set(self, exercise_index: int, set_index: int) -> bool:
        """
        Remove a set unless it is the exercise's last one.

        Returns:
            True if a set was removed, False for the last-set no-op
        """
        exercise = self._exercise(exercise_index)
        _check_index(set_index, len(exercise.sets), "Set")
        if len(exercise.sets) <= 1:
            return False
        del exercise.sets[set_index]
        return True

    def discard(self) -> None:
        """Drop the active session without recording it."""
        session = self._require_active()
        self._active = None
        logger.info(f"Discarded session {session.id}")

    def finish(self, now: Optional[datetime] = None) -> WorkoutSummary:
        """
        Complete the active session.

        Detects personal records, appends the session to the history and
        returns to idle. If saving fails, records are restored, the error
        propagates and the session stays active.

        Returns:
            Summary with its own copy of the session, new record exercise ids
            and total volume
        """
        session = self._require_active()
        now = now or self.clock()

        # Updates are collected first and applied with one replace
        records = {r.exercise_id: r for r in self.store.records}
        new_record_ids: list[str] = []

        for exercise in session.exercises:
            max_weight = max(s.weight for s in exercise.sets)
            if max_weight <= 0:
                continue

            existing = records.get(exercise.exercise_id)
            if existing is not None and max_weight <= existing.weight:
                continue

            records[exercise.exercise_id] = PersonalRecord(
                exercise_id=exercise.exercise_id,
                weight=max_weight,
                date=now,
            )
            if exercise.exercise_id not in new_record_ids:
                new_record_ids.append(exercise.exercise_id)

        finished = session.model_copy(deep=True)
        summary = WorkoutSummary(
            session=finished.model_copy(deep=True),
            new_record_exercise_ids=new_record_ids,
            total_volume=session_volume(finished),
        )

        previous_records = self.store.records
        try:
            if new_record_ids:
                self.store.replace_records(records.values())
            self.store.replace_sessions((*self.store.sessions, finished))
        except Exception as e:
            logger.error(f"Failed to save session {finished.id}, keeping it active: {e}")
            if self.store.records is not previous_records:
                self.store.replace_records(previous_records)
            raise
        self._active = None

        logger.info(
            f"Finished session {finished.id}: volume {summary.total_volume:g}, "
            f"{len(new_record_ids)} new records"
        )
        return summary

    def history_newest_first(self) -> list[WorkoutSession]:
        return sorted(self.store.sessions, key=lambda s: s.date, reverse=True)
