# liftlog/models/stat.py
from dataclasses import dataclass, field
from itertools import groupby
from typing import List

from sqlalchemy import and_, delete, insert, select

from .. import db
from ..storage import storage_call
from .exercise import Exercise
from .workout import DATE_FORMAT, Workout, WorkoutSet


class PinnedExercise(db.Model):
    __tablename__ = "pinned_exercise"
    __table_args__ = (
        db.UniqueConstraint("user_id", "exercise_id", name="uq_pinned_exercise"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)
    exercise_id = db.Column(db.Integer, db.ForeignKey("exercise.id"), nullable=False)


@dataclass
class Stat:
    """
    Progress of one exercise. ``dates``, ``reps``, ``volumes`` and ``weight``
    are index-aligned: entry i describes the i-th logged set.
    """

    id: int
    name: str
    pinned: bool
    dates: List[str] = field(default_factory=list)
    reps: List[int] = field(default_factory=list)
    volumes: List[float] = field(default_factory=list)
    weight: List[float] = field(default_factory=list)

    def add_set(self, day: str, reps: int, weight: float) -> None:
        self.dates.append(day)
        self.reps.append(reps)
        self.weight.append(weight)
        self.volumes.append(reps * weight)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "pinned": self.pinned,
            "dates": self.dates,
            "reps": self.reps,
            "volumes": self.volumes,
            "weight": self.weight,
        }


@storage_call
def get_stats(user_id: int, pinned_only: bool = False) -> List[Stat]:
    query = (
        select(
            Exercise.id.label("exercise_id"),
            Exercise.name.label("exercise_name"),
            PinnedExercise.id.isnot(None).label("pinned"),
            Workout.date,
            WorkoutSet.reps,
            WorkoutSet.weight,
        )
        .select_from(WorkoutSet)
        .join(Workout, Workout.id == WorkoutSet.workout_id)
        .join(Exercise, Exercise.id == WorkoutSet.exercise_id)
        .outerjoin(
            PinnedExercise,
            and_(
                PinnedExercise.exercise_id == Exercise.id,
                PinnedExercise.user_id == user_id,
            ),
        )
        .where(Workout.user_id == user_id)
        .order_by(Exercise.id, Workout.date, WorkoutSet.id)
    )
    if pinned_only:
        query = query.where(PinnedExercise.id.isnot(None))

    rows = db.session.execute(query).all()

    stats = []
    for (exercise_id, exercise_name, pinned), group in groupby(
        rows, key=lambda r: (r.exercise_id, r.exercise_name, bool(r.pinned))
    ):
        stat = Stat(id=exercise_id, name=exercise_name, pinned=pinned)
        for r in group:
            stat.add_set(r.date.strftime(DATE_FORMAT), r.reps, float(r.weight))
        stats.append(stat)
    return stats


@storage_call
def pin_exercise(user_id: int, exercise_id: int) -> None:
    db.session.execute(
        insert(PinnedExercise.__table__).values(user_id=user_id, exercise_id=exercise_id)
    )


@storage_call
def unpin_exercise(user_id: int, exercise_id: int) -> int:
    result = db.session.execute(
        delete(PinnedExercise.__table__).where(
            PinnedExercise.user_id == user_id,
            PinnedExercise.exercise_id == exercise_id,
        )
    )
    return result.rowcount
