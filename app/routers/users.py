from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import logging

from ..database import get_db
from ..models.user import User, UserRole, UserStatus
from ..schemas.identity import Identity
from ..schemas.user import UserResponse, UserSave, UserUpdate
from ..utils.db_helpers import store_errors
from ..utils.dependencies import require_role

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])


@router.put("/user", response_model=UserResponse)
def save_user(user_data: UserSave, db: Session = Depends(get_db)):
    """
    Save a user on sign-in.

    - new email: stored as a guest
    - existing user asking for host status: status becomes Requested
    - any other existing user: returned unchanged
    """
    with store_errors("save_user"):
        user = db.query(User).filter(User.email == user_data.email).first()

        if user:
            if user_data.status == UserStatus.REQUESTED:
                user.status = UserStatus.REQUESTED.value
                db.commit()
                db.refresh(user)
                logger.info(f"{user.email} requested host status")
            return user

        user = User(
            email=user_data.email,
            name=user_data.name,
            image=user_data.image,
            role=UserRole.GUEST.value,
            status=(user_data.status or UserStatus.VERIFIED).value,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

    logger.info(f"New user {user.email}")
    return user


@router.get("/user/{email}", response_model=UserResponse)
def get_user(email: str, db: Session = Depends(get_db)):
    with store_errors("get_user"):
        user = db.query(User).filter(User.email == email).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


@router.get("/users", response_model=List[UserResponse])
def get_users(
    admin: Identity = Depends(require_role(UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    with store_errors("get_users"):
        return db.query(User).all()


@router.patch("/user/update/{email}", response_model=UserResponse)
def update_user(
    email: str,
    user_data: UserUpdate,
    admin: Identity = Depends(require_role(UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """Change a user's role and/or status"""
    with store_errors("update_user"):
        user = db.query(User).filter(User.email == email).first()
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )
        if user_data.role is not None:
            user.role = user_data.role.value
        if user_data.status is not None:
            user.status = user_data.status.value
        db.commit()
        db.refresh(user)

    logger.info(f"{admin.email} updated {email}: role={user.role} status={user.status}")
    return user
