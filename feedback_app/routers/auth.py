from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.orm import Session

from feedback_app.core.security.auth import generate_token, get_current_user
from feedback_app.crud import users as crud_users
from feedback_app.db.session import get_db
from feedback_app.models.user import User
from feedback_app.schemas.user import LoginRequest, RegisterRequest, UserUpdateRequest
from feedback_app.utils.validation import (
    is_valid_object_id,
    raise_for_errors,
    validate_login,
    validate_registration,
    validate_user_update,
)

router = APIRouter(prefix="/auth", tags=["authentication"])

# Routes that hash or check passwords are plain ``def`` so FastAPI runs
# them in its threadpool instead of on the event loop.


def _require_object_id(user_id: str) -> None:
    if not is_valid_object_id(user_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid ID format"
        )


def _require_self(user_id: str, current_user: User) -> None:
    if user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to modify this user"
        )


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(body: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    raise_for_errors(validate_registration(body))
    user = crud_users.create_user(db, RegisterRequest(**body))
    return {
        "user": crud_users.to_public_user(user),
        "token": generate_token(user)
    }


@router.post("/login")
def login(body: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    raise_for_errors(validate_login(body))
    credentials = LoginRequest(email=str(body["email"]), password=str(body["password"]))

    user = crud_users.authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    return {
        "user": crud_users.to_public_user(user),
        "token": generate_token(user)
    }


@router.get("")
def list_users(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"users": [crud_users.to_public_user(user) for user in crud_users.get_users(db)]}


@router.get("/me/profile")
def get_profile(current_user: User = Depends(get_current_user)):
    return {"user": crud_users.to_public_user(current_user)}


@router.get("/{user_id}")
def get_user(user_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    _require_object_id(user_id)
    user = crud_users.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return {"user": crud_users.to_public_user(user)}


@router.put("/{user_id}")
def update_user(
    user_id: str,
    body: Dict[str, Any] = Body(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    _require_object_id(user_id)
    _require_self(user_id, current_user)
    raise_for_errors(validate_user_update(body))

    update = UserUpdateRequest(
        name=body.get("name"),
        email=body.get("email"),
        password=body.get("password")
    )
    user = crud_users.update_user(db, current_user, update)
    return {"user": crud_users.to_public_user(user)}


@router.delete("/{user_id}")
def delete_user(user_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    _require_object_id(user_id)
    _require_self(user_id, current_user)
    crud_users.delete_user(db, current_user)
    return {"message": "User deleted successfully"}
