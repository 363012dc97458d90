import logging
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime
from typing import List, Optional

from fastapi import Depends, FastAPI, Header, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr

import aggregator
import calendar_grid
import datekeys
import streaks
import tracking
from config import settings
from database import Mongo, ping
from errors import HabitTrackerError, StorageError, Unauthenticated
from logging_config import setup_logging
from schemas import Habit, User
from security import create_access_token, decode_access_token
from store import HabitStore, UserStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    mongo = Mongo(settings)
    db = mongo.open()
    app.state.mongo = mongo
    app.state.habits = HabitStore(db)
    app.state.users = UserStore(db)
    try:
        app.state.habits.ensure_indexes()
        app.state.users.ensure_indexes()
    except StorageError:
        logger.warning("Could not create indexes, continuing without them")
    try:
        yield
    finally:
        mongo.close()


# App setup
app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HabitTrackerError)
async def habit_tracker_error_handler(request: Request, exc: HabitTrackerError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Request/response models
class TokenOut(BaseModel):
    token: str

class UserOut(BaseModel):
    id: str
    email: EmailStr
    name: str

class CredentialsIn(BaseModel):
    email: EmailStr
    password: str

class SignupIn(CredentialsIn):
    name: str

class HabitIn(BaseModel):
    name: str
    color: Optional[str] = None

class HabitOut(BaseModel):
    id: str
    name: str
    color: str
    tracked_dates: List[str]
    created_at: Optional[datetime] = None
    current_streak: int
    longest_streak: int
    tracked_today: bool

class TrackIn(BaseModel):
    habit_id: str
    date: str  # YYYY-MM-DD

class TrackOut(BaseModel):
    habit: HabitOut
    is_tracked: bool

class StatsOut(BaseModel):
    total_habits: int
    total_tracked_days: int
    completed_today: int
    completion_rate: int
    current_streak: int
    longest_streak: int

class DayOut(BaseModel):
    key: str
    day: int
    in_current_month: bool
    is_today: bool
    is_future: bool
    habit_ids: List[str]

class CalendarOut(BaseModel):
    year: int
    month: int
    habit_id: Optional[str] = None
    tracked_days: int
    days: List[DayOut]


# Dependencies
def get_habit_store(request: Request) -> HabitStore:
    return request.app.state.habits


def get_user_store(request: Request) -> UserStore:
    return request.app.state.users


def get_now() -> datetime:
    return datetime.now()


def get_current_user(
    authorization: Optional[str] = Header(None),
    users: UserStore = Depends(get_user_store),
) -> User:
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthenticated("Not authenticated")
    user_id = decode_access_token(authorization.split(" ", 1)[1])
    if user_id is None:
        logger.warning("Rejected invalid bearer token")
        raise Unauthenticated("Invalid token")
    user = users.get_user(user_id)
    if not user:
        raise Unauthenticated("User not found")
    return user


def habit_out(habit: Habit, now: datetime) -> HabitOut:
    summary = streaks.summarize(habit.tracked_dates, now)
    return HabitOut(
        id=habit.id,
        name=habit.name,
        color=habit.color,
        tracked_dates=tracking.ordered(habit.tracked_dates),
        created_at=habit.created_at,
        current_streak=summary.current,
        longest_streak=summary.longest,
        tracked_today=datekeys.encode(datekeys.today(now)) in habit.tracked_dates,
    )


@app.get("/")
def read_root():
    return {"message": "Habit tracker backend running"}

@app.get("/api/version")
def version():
    return {"version": settings.app_version}

@app.get("/api/health")
def health(request: Request):
    mongo: Optional[Mongo] = getattr(request.app.state, "mongo", None)
    connected = mongo is not None and mongo.client is not None and ping(mongo.db)
    return {
        "backend": "ok",
        "database": "ok" if connected else "unavailable",
        "database_name": settings.database_name,
    }

# Auth endpoints
@app.post("/api/auth/signup", response_model=TokenOut, status_code=status.HTTP_201_CREATED)
def signup(body: SignupIn, users: UserStore = Depends(get_user_store)):
    user = users.create_user(body.email, body.password, body.name)
    return {"token": create_access_token({"sub": user.id})}

@app.post("/api/auth/login", response_model=TokenOut)
def login(body: CredentialsIn, users: UserStore = Depends(get_user_store)):
    user = users.authenticate(body.email, body.password)
    if not user:
        logger.warning("Failed login attempt")
        raise Unauthenticated("Invalid credentials")
    return {"token": create_access_token({"sub": user.id})}

@app.get("/api/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return {"id": user.id, "email": user.email, "name": user.name}


# Habits
@app.get("/api/habits", response_model=List[HabitOut])
def get_habits(
    user: User = Depends(get_current_user),
    habits: HabitStore = Depends(get_habit_store),
    now: datetime = Depends(get_now),
):
    return [habit_out(h, now) for h in habits.list_habits(user.id)]

@app.post("/api/habits", response_model=HabitOut, status_code=status.HTTP_201_CREATED)
def create_habit(
    body: HabitIn,
    user: User = Depends(get_current_user),
    habits: HabitStore = Depends(get_habit_store),
    now: datetime = Depends(get_now),
):
    return habit_out(habits.create_habit(user.id, body.name, body.color), now)

@app.delete("/api/habits/{habit_id}")
def delete_habit(
    habit_id: str,
    user: User = Depends(get_current_user),
    habits: HabitStore = Depends(get_habit_store),
):
    habits.delete_habit(user.id, habit_id)
    return {"message": "Habit deleted successfully"}

@app.post("/api/habits/track", response_model=TrackOut)
def track_habit(
    body: TrackIn,
    user: User = Depends(get_current_user),
    habits: HabitStore = Depends(get_habit_store),
    now: datetime = Depends(get_now),
):
    habit, was_added = habits.toggle_tracked_date(user.id, body.habit_id, body.date, now)
    return {"habit": habit_out(habit, now), "is_tracked": was_added}


# Dashboard
@app.get("/api/stats", response_model=StatsOut)
def stats(
    user: User = Depends(get_current_user),
    habits: HabitStore = Depends(get_habit_store),
    now: datetime = Depends(get_now),
):
    return asdict(aggregator.dashboard(habits.list_habits(user.id), now))

@app.get("/api/calendar", response_model=CalendarOut)
def calendar(
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    habit: Optional[str] = Query(None),
    user: User = Depends(get_current_user),
    habits: HabitStore = Depends(get_habit_store),
    now: datetime = Depends(get_now),
):
    if year is None:
        year = now.year
    if month is None:
        month = now.month
    if habit is None:
        shown = habits.list_habits(user.id)
    else:
        shown = [habits.get_habit(user.id, habit)]
    cells = calendar_grid.month_grid(year, month, shown, now)
    return {
        "year": year,
        "month": month,
        "habit_id": habit,
        "tracked_days": aggregator.total_tracked_days(shown),
        "days": [asdict(c) for c in cells],
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
