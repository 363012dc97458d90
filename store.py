"""
Persistence gateways for users and habits.

Every habit query is scoped by the owning user id; a habit that exists but
belongs to someone else is reported exactly like a missing one.
"""
import logging
import re
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import List, Optional, Tuple, Union

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

import datekeys
import tracking
from errors import NotFound, StorageError, ValidationError
from schemas import DEFAULT_COLOR, HEX_COLOR_PATTERN, Habit, User
from security import get_password_hash, verify_password

logger = logging.getLogger(__name__)

HEX_COLOR_RE = re.compile(HEX_COLOR_PATTERN)
EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")

MAX_HABIT_NAME = 100
MAX_USER_NAME = 50
MIN_PASSWORD = 6


@contextmanager
def storage_errors(action: str):
    try:
        yield
    except PyMongoError as exc:
        logger.exception("Storage failure while %s", action)
        raise StorageError() from exc


def _object_id(value: str) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def _habit_from_doc(doc: dict) -> Habit:
    return Habit(
        id=str(doc["_id"]),
        user_id=doc["user_id"],
        name=doc["name"],
        color=doc.get("color", DEFAULT_COLOR),
        tracked_dates=tracking.normalize(doc.get("tracked_dates", [])),
        created_at=doc.get("created_at"),
    )


def _user_from_doc(doc: dict) -> User:
    return User(
        id=str(doc["_id"]),
        email=doc["email"],
        password_hash=doc.get("password_hash", ""),
        name=doc.get("name") or doc["email"],
        created_at=doc.get("created_at"),
    )


def validate_habit_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Habit name is required")
    name = name.strip()
    if len(name) > MAX_HABIT_NAME:
        raise ValidationError(f"Habit name cannot exceed {MAX_HABIT_NAME} characters")
    return name


def validate_color(color: Optional[str]) -> str:
    color = color or DEFAULT_COLOR
    if not isinstance(color, str) or not HEX_COLOR_RE.match(color):
        raise ValidationError("Invalid color format. Please use hex color (e.g., #3b82f6)")
    return color


class HabitStore:
    def __init__(self, db: Database):
        self.collection = db["habit"]

    def ensure_indexes(self) -> None:
        with storage_errors("creating habit indexes"):
            self.collection.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])

    def list_habits(self, user_id: str) -> List[Habit]:
        with storage_errors("listing habits"):
            cursor = self.collection.find({"user_id": user_id}).sort("created_at", DESCENDING)
            return [_habit_from_doc(doc) for doc in cursor]

    def _find_owned(self, user_id: str, habit_id: str) -> dict:
        oid = _object_id(habit_id)
        if oid is None:
            raise NotFound()
        with storage_errors("loading habit"):
            doc = self.collection.find_one({"_id": oid, "user_id": user_id})
        if not doc:
            raise NotFound()
        return doc

    def get_habit(self, user_id: str, habit_id: str) -> Habit:
        return _habit_from_doc(self._find_owned(user_id, habit_id))

    def create_habit(self, user_id: str, name: str, color: Optional[str] = None) -> Habit:
        doc = {
            "user_id": user_id,
            "name": validate_habit_name(name),
            "color": validate_color(color),
            "tracked_dates": [],
            "created_at": datetime.now(timezone.utc),
        }
        with storage_errors("creating habit"):
            res = self.collection.insert_one(doc)
        doc["_id"] = res.inserted_id
        logger.info("User %s created habit %s", user_id, res.inserted_id)
        return _habit_from_doc(doc)

    def delete_habit(self, user_id: str, habit_id: str) -> None:
        doc = self._find_owned(user_id, habit_id)
        with storage_errors("deleting habit"):
            self.collection.delete_one({"_id": doc["_id"], "user_id": user_id})
        logger.info("User %s deleted habit %s", user_id, habit_id)

    def toggle_tracked_date(
        self,
        user_id: str,
        habit_id: str,
        date_key: str,
        now: Union[date, datetime, None] = None,
    ) -> Tuple[Habit, bool]:
        """Flip `date_key` on the habit and persist the new set.

        Read-modify-write: a concurrent toggle on the same habit may be
        overwritten (last write wins).
        """
        datekeys.decode(date_key)
        doc = self._find_owned(user_id, habit_id)
        tracked, was_added = tracking.toggle_checked(doc.get("tracked_dates", []), date_key, now)
        stored = tracking.ordered(tracked)
        with storage_errors("toggling tracked date"):
            self.collection.update_one({"_id": doc["_id"]}, {"$set": {"tracked_dates": stored}})
        doc["tracked_dates"] = stored
        logger.info(
            "User %s %s %s on habit %s",
            user_id, "tracked" if was_added else "untracked", date_key, habit_id,
        )
        return _habit_from_doc(doc), was_added


class UserStore:
    def __init__(self, db: Database):
        self.collection = db["user"]

    def ensure_indexes(self) -> None:
        with storage_errors("creating user indexes"):
            self.collection.create_index("email", unique=True)

    def create_user(self, email: str, password: str, name: str) -> User:
        email = (email or "").strip().lower()
        if not EMAIL_RE.match(email):
            raise ValidationError("Please enter a valid email")
        if not password or len(password) < MIN_PASSWORD:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD} characters")
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required")
        if len(name) > MAX_USER_NAME:
            raise ValidationError(f"Name cannot exceed {MAX_USER_NAME} characters")

        with storage_errors("checking for existing user"):
            existing = self.collection.find_one({"email": email})
        if existing:
            raise ValidationError("Email already registered")
        doc = {
            "email": email,
            "password_hash": get_password_hash(password),
            "name": name,
            "created_at": datetime.now(timezone.utc),
        }
        with storage_errors("creating user"):
            try:
                res = self.collection.insert_one(doc)
            except DuplicateKeyError:
                raise ValidationError("Email already registered")
        doc["_id"] = res.inserted_id
        logger.info("Registered user %s", res.inserted_id)
        return _user_from_doc(doc)

    def get_user(self, user_id: str) -> Optional[User]:
        oid = _object_id(user_id)
        if oid is None:
            return None
        with storage_errors("loading user"):
            doc = self.collection.find_one({"_id": oid})
        return _user_from_doc(doc) if doc else None

    def authenticate(self, email: str, password: str) -> Optional[User]:
        with storage_errors("loading user"):
            doc = self.collection.find_one({"email": (email or "").strip().lower()})
        if not doc or not verify_password(password, doc.get("password_hash", "")):
            return None
        return _user_from_doc(doc)
