import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from feedback_app.core.security.auth import create_hashed_password, verify_password
from feedback_app.models.user import User
from feedback_app.schemas.user import RegisterRequest, UserPublic, UserUpdateRequest

logger = logging.getLogger(__name__)


def to_public_user(user: User) -> UserPublic:
    return UserPublic(
        id=user.id,
        name=user.name,
        email=user.email,
        createdAt=user.created_at
    )


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def get_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at).all()


def create_user(db: Session, user_data: RegisterRequest) -> User:
    if get_user_by_email(db, user_data.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already exists"
        )

    user = User(
        name=user_data.name.strip(),
        email=user_data.email,
        hashed_password=create_hashed_password(user_data.password)
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


def update_user(db: Session, user: User, user_data: UserUpdateRequest) -> User:
    # Empty values leave the field unchanged
    if user_data.name:
        user.name = user_data.name.strip()
    if user_data.email and user_data.email != user.email:
        if get_user_by_email(db, user_data.email):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email is already registered"
            )
        user.email = user_data.email
    if user_data.password:
        user.hashed_password = create_hashed_password(user_data.password)

    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user: User) -> None:
    db.delete(user)
    db.commit()
    logger.info(f"Deleted user {user.id}")
