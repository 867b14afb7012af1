import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.crud import user as user_crud
from app.database import get_db
from app import models
from app.models.user import USER_ROLES
from app.schemas import LoginRequest, RegisterRequest, Token, UserDisplay
from app.utils.security import authenticate_user, create_access_token, get_current_user

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


# ===== REGISTER ENDPOINT =====

@router.post("/register", status_code=201)
async def register(user_data: RegisterRequest, db: Session = Depends(get_db)):
    """Register a student or trainer and create their profile and stats rows"""
    role = (user_data.role or "student").strip().lower()
    if role not in USER_ROLES:
        raise HTTPException(
            status_code=400,
            detail="Role must be one of: student, trainer"
        )

    if user_crud.get_user_by_email(db, user_data.email):
        raise HTTPException(status_code=400, detail="Email already registered")

    try:
        new_user = user_crud.create_user(
            db,
            name=user_data.name.strip(),
            email=user_data.email,
            password=user_data.password,
            role=role,
        )
        profile_fields = {
            key: value
            for key, value in {
                "bio": user_data.bio,
                "languages": user_data.languages,
                "hourly_rate": user_data.hourly_rate,
                "experience": user_data.experience,
            }.items()
            if value is not None
        }
        if profile_fields:
            user_crud.update_user_profile(db, new_user.id, profile_fields)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Registration failed for %s: %r", user_data.email, e)
        raise HTTPException(status_code=500, detail="Internal server error")

    access_token = create_access_token(data={"sub": new_user.email, "role": new_user.role})
    return {
        "message": "Registration successful",
        "access_token": access_token,
        "token_type": "bearer",
        "role": new_user.role,
    }


# ===== LOGIN ENDPOINT =====

@router.post("/login", response_model=Token)
async def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Verify credentials and return access token"""
    user = authenticate_user(db, credentials.email, credentials.password)

    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is deactivated")

    access_token = create_access_token(data={"sub": user.email, "role": user.role})

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "role": user.role
    }


# ===== CURRENT USER =====

@router.get("/me", response_model=UserDisplay)
def me(current_user: models.User = Depends(get_current_user)):
    return current_user
