"""User CRUD endpoints (access token required)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from rolegate.api.deps import get_current_user
from rolegate.core.database import get_db
from rolegate.core.exceptions import NotFoundError
from rolegate.schemas.auth import CurrentUser
from rolegate.schemas.users import UserCreate, UserResponse, UserUpdate
from rolegate.services import users as user_service

router = APIRouter(dependencies=[Depends(get_current_user)])

DbSession = Annotated[Session, Depends(get_db)]


@router.post("", response_model=UserResponse)
def create_user(body: UserCreate, db: DbSession) -> UserResponse:
    return UserResponse.model_validate(user_service.create_user(db, body))


@router.get("", response_model=list[UserResponse])
def list_users(db: DbSession, active: bool | None = None) -> list[UserResponse]:
    """List users, optionally only active (active=true) or inactive (active=false) ones."""
    return [UserResponse.model_validate(u) for u in user_service.list_users(db, active)]


@router.get("/me", response_model=CurrentUser)
def read_current_user(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    return current_user


@router.get("/username/{username}", response_model=UserResponse)
def get_user_by_username(username: str, db: DbSession) -> UserResponse:
    user = user_service.get_user_by_username(db, username)
    if user is None:
        raise NotFoundError(f"User not found with username: {username}")
    return UserResponse.model_validate(user)


@router.get("/check-username/{username}", response_model=bool)
def check_username(username: str, db: DbSession) -> bool:
    return user_service.username_exists(db, username)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: DbSession) -> UserResponse:
    user = user_service.get_user(db, user_id)
    if user is None:
        raise NotFoundError(f"User not found with id: {user_id}")
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: int, body: UserUpdate, db: DbSession) -> UserResponse:
    return UserResponse.model_validate(user_service.update_user(db, user_id, body))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: DbSession) -> Response:
    user_service.delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
