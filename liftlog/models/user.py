# liftlog/models/user.py
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import insert, select, update

from .. import db
from ..storage import storage_call


class User(db.Model):
    __tablename__ = "user"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    username = db.Column(db.String(50), nullable=False)
    password = db.Column(db.String(255), nullable=False)
    apikey = db.Column(db.String(64), unique=True)


@dataclass(frozen=True)
class UserRecord:
    id: int
    email: str
    username: str
    password: str
    apikey: Optional[str] = None

    def to_dict(self):
        # never expose the hash
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
        }


_USER_COLUMNS = (User.id, User.email, User.username, User.password, User.apikey)

# fields update_user() is allowed to touch
UPDATABLE_FIELDS = ("email", "username", "password")


def _decode(row) -> Optional[UserRecord]:
    if row is None:
        return None
    return UserRecord(
        id=row.id,
        email=row.email,
        username=row.username,
        password=row.password,
        apikey=row.apikey,
    )


@storage_call
def create_user(email: str, password_hash: str, username: str) -> int:
    result = db.session.execute(
        insert(User.__table__).values(
            email=email, password=password_hash, username=username
        )
    )
    return result.inserted_primary_key[0]


@storage_call
def get_user_by_email(email: str) -> Optional[UserRecord]:
    row = db.session.execute(
        select(*_USER_COLUMNS).where(User.email == email)
    ).first()
    return _decode(row)


@storage_call
def get_user_by_id(user_id: int) -> Optional[UserRecord]:
    row = db.session.execute(
        select(*_USER_COLUMNS).where(User.id == user_id)
    ).first()
    return _decode(row)


@storage_call
def get_user_by_api_key(key: str) -> Optional[UserRecord]:
    row = db.session.execute(
        select(*_USER_COLUMNS).where(User.apikey == key)
    ).first()
    return _decode(row)


@storage_call
def update_user(user_id: int, **fields) -> int:
    """
    Update any of email / username / password (already hashed).
    Returns the number of matched rows.
    """
    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"cannot update user fields: {sorted(unknown)}")
    if not fields:
        return 0

    result = db.session.execute(
        update(User.__table__).where(User.id == user_id).values(**fields)
    )
    return result.rowcount


@storage_call
def set_api_key(user_id: int, key: Optional[str]) -> int:
    result = db.session.execute(
        update(User.__table__).where(User.id == user_id).values(apikey=key)
    )
    return result.rowcount
