# ---------- routes/auth_routes.py ----------
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from auth import create_token, get_current_user
from database import get_db
from services.user_service import UserService, EmailTaken

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


# ── Pydantic schemas ──────────────────────────────────────────────
class SignupRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=6)
    name: Optional[str] = Field(default=None, max_length=100)


class LoginRequest(BaseModel):
    email: str
    password: str


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = None
    location: Optional[str] = Field(default=None, max_length=100)
    website: Optional[str] = Field(default=None, max_length=255)
    reading_goal: Optional[int] = Field(default=None, ge=1, le=1000)


def _session_payload(user) -> dict:
    return {"token": create_token(user.id, user.email), "user": user.to_dict()}


# ── Routes ────────────────────────────────────────────────────────
@router.post("/signup", status_code=201)
async def signup(body: SignupRequest, db: Session = Depends(get_db)):
    """Create an account and return a bearer token for it."""
    try:
        user = UserService.register(db, body.email, body.password, body.name)
        return _session_payload(user)
    except EmailTaken:
        raise HTTPException(status_code=400, detail="An account with this email already exists")
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/login")
async def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Authenticate with email + password."""
    user = UserService.authenticate(db, body.email, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return _session_payload(user)


@router.get("/profile")
async def get_profile(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    user = UserService.get_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user.to_dict()


@router.put("/profile")
async def update_profile(
    body: ProfileUpdate,
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        data = body.model_dump(exclude_unset=True)
        if "reading_goal" in data and data["reading_goal"] is None:
            data.pop("reading_goal")
        user = UserService.update_profile(db, user_id, data)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
