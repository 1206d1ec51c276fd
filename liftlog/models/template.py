# liftlog/models/template.py
from dataclasses import dataclass, field
from itertools import groupby
from typing import List, Optional

from sqlalchemy import delete, insert, select, update

from .. import db
from ..storage import storage_call
from .exercise import Exercise, ExerciseSets, group_by_exercise


class Template(db.Model):
    __tablename__ = "template"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)


class TemplateSet(db.Model):
    __tablename__ = "template_set"
    __table_args__ = (
        db.CheckConstraint("reps >= 0", name="ck_template_set_reps"),
        db.CheckConstraint("weight >= 0", name="ck_template_set_weight"),
    )

    id = db.Column(db.Integer, primary_key=True)
    reps = db.Column(db.Integer, nullable=False)
    weight = db.Column(db.Numeric(7, 2, asdecimal=False), nullable=False)
    exercise_id = db.Column(db.Integer, db.ForeignKey("exercise.id"), nullable=False)
    template_id = db.Column(db.Integer, db.ForeignKey("template.id"), nullable=False, index=True)


@dataclass
class TemplateRecord:
    id: int
    name: str
    exercises: List[ExerciseSets] = field(default_factory=list)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "exercises": [e.to_dict() for e in self.exercises],
        }


def _template_rows_query(user_id: int):
    return (
        select(
            Template.id.label("template_id"),
            Template.name.label("template_name"),
            TemplateSet.reps,
            TemplateSet.weight,
            Exercise.id.label("exercise_id"),
            Exercise.name.label("exercise_name"),
        )
        .select_from(Template)
        .outerjoin(TemplateSet, TemplateSet.template_id == Template.id)
        .outerjoin(Exercise, Exercise.id == TemplateSet.exercise_id)
        .where(Template.user_id == user_id)
        .order_by(Template.id, TemplateSet.id)
    )


def _decode_templates(rows) -> List[TemplateRecord]:
    templates = []
    for (template_id, template_name), group in groupby(
        rows, key=lambda r: (r.template_id, r.template_name)
    ):
        templates.append(
            TemplateRecord(
                id=template_id,
                name=template_name,
                exercises=group_by_exercise(r for r in group if r.exercise_id is not None),
            )
        )
    return templates


@storage_call
def save_template(name: str, user_id: int) -> int:
    result = db.session.execute(
        insert(Template.__table__).values(name=name, user_id=user_id)
    )
    return result.inserted_primary_key[0]


@storage_call
def save_template_set(template_set, template_id: int) -> None:
    db.session.execute(
        insert(TemplateSet.__table__).values(
            reps=template_set.reps,
            weight=template_set.weight,
            exercise_id=template_set.exercise_id,
            template_id=template_id,
        )
    )


@storage_call
def get_templates(user_id: int) -> List[TemplateRecord]:
    rows = db.session.execute(_template_rows_query(user_id)).all()
    return _decode_templates(rows)


@storage_call
def get_template(template_id: int, user_id: int) -> Optional[TemplateRecord]:
    rows = db.session.execute(
        _template_rows_query(user_id).where(Template.id == template_id)
    ).all()
    templates = _decode_templates(rows)
    return templates[0] if templates else None


@storage_call
def update_template_name(template_id: int, name: str, user_id: int) -> int:
    result = db.session.execute(
        update(Template.__table__)
        .where(Template.id == template_id, Template.user_id == user_id)
        .values(name=name)
    )
    return result.rowcount


@storage_call
def delete_template_sets(template_id: int) -> int:
    result = db.session.execute(
        delete(TemplateSet.__table__).where(TemplateSet.template_id == template_id)
    )
    return result.rowcount


@storage_call
def delete_template(template_id: int, user_id: int) -> int:
    result = db.session.execute(
        delete(Template.__table__).where(
            Template.id == template_id, Template.user_id == user_id
        )
    )
    return result.rowcount
