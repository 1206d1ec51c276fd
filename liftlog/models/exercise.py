# liftlog/models/exercise.py
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy import insert, select

from .. import db
from ..storage import storage_call


class Exercise(db.Model):
    __tablename__ = "exercise"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)


@dataclass(frozen=True)
class ExerciseRecord:
    id: int
    name: str

    def to_dict(self):
        return {"id": self.id, "name": self.name}


@storage_call
def get_exercises() -> List[ExerciseRecord]:
    rows = db.session.execute(
        select(Exercise.id, Exercise.name).order_by(Exercise.name)
    ).all()
    return [ExerciseRecord(id=r.id, name=r.name) for r in rows]


@storage_call
def get_exercise(exercise_id: int) -> Optional[ExerciseRecord]:
    row = db.session.execute(
        select(Exercise.id, Exercise.name).where(Exercise.id == exercise_id)
    ).first()
    if row is None:
        return None
    return ExerciseRecord(id=row.id, name=row.name)


@storage_call
def create_exercise(name: str) -> int:
    result = db.session.execute(insert(Exercise.__table__).values(name=name))
    return result.inserted_primary_key[0]


@dataclass(frozen=True)
class SetRecord:
    reps: int
    weight: float

    def to_dict(self):
        return {"reps": self.reps, "weight": self.weight}


@dataclass
class ExerciseSets:
    """An exercise together with the sets logged (or planned) for it."""

    id: int
    name: str
    sets: List[SetRecord] = field(default_factory=list)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "sets": [s.to_dict() for s in self.sets],
        }


def group_by_exercise(rows) -> List[ExerciseSets]:
    """
    Fold (exercise_id, exercise_name, reps, weight) rows into one entry per
    exercise, keeping the order in which each exercise first appears.
    """
    grouped: Dict[int, ExerciseSets] = {}
    for row in rows:
        entry = grouped.get(row.exercise_id)
        if entry is None:
            entry = ExerciseSets(id=row.exercise_id, name=row.exercise_name)
            grouped[row.exercise_id] = entry
        entry.sets.append(SetRecord(reps=row.reps, weight=float(row.weight)))
    return list(grouped.values())
