"""
seed_exercises.py

Fill the shared exercise catalog with a default list. Exercises that already
exist (by name) are left alone, so the script can be run repeatedly.

    DATABASE_URL=... python script/seed_exercises.py
"""

from liftlog import create_app
from liftlog.errors import ConstraintError
from liftlog.models.exercise import create_exercise, get_exercises
from liftlog.storage import atomic

DEFAULT_EXERCISES = [
    "Bench Press",
    "Incline Dumbbell Press",
    "Squat",
    "Front Squat",
    "Deadlift",
    "Romanian Deadlift",
    "Overhead Press",
    "Barbell Row",
    "Pull Up",
    "Chin Up",
    "Dips",
    "Lunge",
    "Leg Press",
    "Barbell Curl",
    "Triceps Pushdown",
    "Lateral Raise",
    "Calf Raise",
]


def seed(names=DEFAULT_EXERCISES):
    existing = {e.name for e in get_exercises()}
    added = 0
    for name in names:
        if name in existing:
            continue
        try:
            with atomic():
                create_exercise(name)
            added += 1
        except ConstraintError:
            continue
    return added


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        count = seed()
        app.logger.info(f"[seed] added {count} exercises")
        print(f"Added {count} exercises")
