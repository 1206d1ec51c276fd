# liftlog/models/workout.py
from dataclasses import dataclass, field
from datetime import date, time as dt_time
from typing import List, Optional

from sqlalchemy import delete, insert, select, update

from .. import db
from ..storage import storage_call
from .exercise import Exercise, ExerciseSets, group_by_exercise

DATE_FORMAT = "%d-%m-%Y"


class Workout(db.Model):
    __tablename__ = "workout"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    date = db.Column(db.Date, nullable=False, default=date.today)
    # how long the session took
    time = db.Column(db.Time)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)


class WorkoutSet(db.Model):
    __tablename__ = "set"
    __table_args__ = (
        db.CheckConstraint("reps >= 0", name="ck_set_reps"),
        db.CheckConstraint("weight >= 0", name="ck_set_weight"),
    )

    id = db.Column(db.Integer, primary_key=True)
    reps = db.Column(db.Integer, nullable=False)
    weight = db.Column(db.Numeric(7, 2, asdecimal=False), nullable=False)
    exercise_id = db.Column(db.Integer, db.ForeignKey("exercise.id"), nullable=False)
    workout_id = db.Column(db.Integer, db.ForeignKey("workout.id"), nullable=False, index=True)


# ------------------------------
# Result records
# ------------------------------
@dataclass(frozen=True)
class InsertedWorkout:
    id: int
    affected_rows: int


@dataclass(frozen=True)
class WorkoutSummary:
    id: int
    name: str
    date: str
    time_hour: Optional[int]
    time_minute: Optional[int]

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date,
            "time_hour": self.time_hour,
            "time_minute": self.time_minute,
        }


@dataclass
class WorkoutDetail:
    id: int
    name: str
    date: str
    time: Optional[str]
    exercises: List[ExerciseSets] = field(default_factory=list)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date,
            "time": self.time,
            "exercises": [e.to_dict() for e in self.exercises],
        }


def _format_date(value: Optional[date]) -> str:
    return value.strftime(DATE_FORMAT) if value else ""


def _format_time(value: Optional[dt_time]) -> Optional[str]:
    return value.strftime("%H:%M:%S") if value else None


# ------------------------------
# Queries
# ------------------------------
@storage_call
def save_workout(name: str, time: Optional[dt_time], user_id: int) -> InsertedWorkout:
    """
    Insert a workout row.

    :param name: the name of the workout
    :param time: how long the workout took
    :param user_id: to whom the workout belongs
    :returns: the new id and the driver's affected-row count
    """
    result = db.session.execute(
        insert(Workout.__table__).values(name=name, time=time, user_id=user_id)
    )
    return InsertedWorkout(
        id=result.inserted_primary_key[0],
        affected_rows=result.rowcount,
    )


@storage_call
def save_set(exercise_set, workout_id: int) -> None:
    """
    Insert one set of the given workout. ``exercise_set`` needs ``reps``,
    ``weight`` and ``exercise_id``; the workout is assumed to exist.
    """
    db.session.execute(
        insert(WorkoutSet.__table__).values(
            reps=exercise_set.reps,
            weight=exercise_set.weight,
            exercise_id=exercise_set.exercise_id,
            workout_id=workout_id,
        )
    )


@storage_call
def get_workout_history(rows: int, user_id: int) -> List[WorkoutSummary]:
    """
    The ``rows`` most recent workouts of a user, newest (highest id) first.
    """
    result = db.session.execute(
        select(Workout.id, Workout.name, Workout.date, Workout.time)
        .where(Workout.user_id == user_id)
        .order_by(Workout.id.desc())
        .limit(max(int(rows), 0))
    ).all()

    return [
        WorkoutSummary(
            id=r.id,
            name=r.name,
            date=_format_date(r.date),
            time_hour=r.time.hour if r.time else None,
            time_minute=r.time.minute if r.time else None,
        )
        for r in result
    ]


@storage_call
def get_workout(workout_id: int, user_id: int) -> Optional[WorkoutDetail]:
    rows = db.session.execute(
        select(
            Workout.id,
            Workout.name,
            Workout.date,
            Workout.time,
            WorkoutSet.reps,
            WorkoutSet.weight,
            Exercise.id.label("exercise_id"),
            Exercise.name.label("exercise_name"),
        )
        .select_from(Workout)
        .outerjoin(WorkoutSet, WorkoutSet.workout_id == Workout.id)
        .outerjoin(Exercise, Exercise.id == WorkoutSet.exercise_id)
        .where(Workout.id == workout_id, Workout.user_id == user_id)
        .order_by(WorkoutSet.id)
    ).all()

    if not rows:
        return None

    head = rows[0]
    return WorkoutDetail(
        id=head.id,
        name=head.name,
        date=_format_date(head.date),
        time=_format_time(head.time),
        exercises=group_by_exercise(r for r in rows if r.exercise_id is not None),
    )


@storage_call
def update_workout(workout_id: int, name: str, time: Optional[dt_time], user_id: int) -> int:
    result = db.session.execute(
        update(Workout.__table__)
        .where(Workout.id == workout_id, Workout.user_id == user_id)
        .values(name=name, time=time)
    )
    return result.rowcount


@storage_call
def delete_sets(workout_id: int) -> int:
    result = db.session.execute(
        delete(WorkoutSet.__table__).where(WorkoutSet.workout_id == workout_id)
    )
    return result.rowcount


@storage_call
def delete_workout(workout_id: int, user_id: int) -> int:
    result = db.session.execute(
        delete(Workout.__table__).where(
            Workout.id == workout_id, Workout.user_id == user_id
        )
    )
    return result.rowcount
