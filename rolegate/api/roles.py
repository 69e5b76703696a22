"""Role CRUD and role-assignment endpoints (access token required)."""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.orm import Session

from rolegate.api.deps import get_current_user
from rolegate.core.database import get_db
from rolegate.core.exceptions import NotFoundError
from rolegate.core.transaction import get_transaction_id
from rolegate.schemas.roles import RoleCreate, RoleResponse, RoleUpdate, RoleUserCount
from rolegate.schemas.users import UserResponse
from rolegate.services import roles as role_service

router = APIRouter(dependencies=[Depends(get_current_user)])

DbSession = Annotated[Session, Depends(get_db)]
RoleNames = Annotated[list[str], Body(description="Role names", examples=[["ADMIN", "AUDITOR"]])]


@router.post("", response_model=RoleResponse)
def create_role(body: RoleCreate, db: DbSession) -> RoleResponse:
    return RoleResponse.model_validate(role_service.create_role(db, body))


@router.get("", response_model=list[RoleResponse])
def list_roles(db: DbSession) -> list[RoleResponse]:
    return [RoleResponse.model_validate(r) for r in role_service.list_roles(db)]


@router.get("/active", response_model=list[RoleResponse])
def list_active_roles(db: DbSession) -> list[RoleResponse]:
    return [RoleResponse.model_validate(r) for r in role_service.list_active_roles(db)]


@router.get("/name/{name}", response_model=RoleResponse)
def get_role_by_name(name: str, db: DbSession) -> RoleResponse:
    role = role_service.get_role_by_name(db, name)
    if role is None:
        raise NotFoundError(f"Role not found with name: {name}")
    return RoleResponse.model_validate(role)


@router.get("/name/{role_name}/users", response_model=list[UserResponse])
def list_users_by_role_name(role_name: str, db: DbSession) -> list[UserResponse]:
    """Users holding the role; empty when the role is inactive."""
    users = role_service.list_users_by_role_name(db, role_name)
    return [UserResponse.model_validate(u) for u in users]


@router.get("/name/{role_name}/count", response_model=RoleUserCount)
def count_users_by_role_name(role_name: str, db: DbSession) -> RoleUserCount:
    return RoleUserCount(
        role_name=role_name,
        user_count=role_service.count_users_by_role_name(db, role_name),
        transaction_id=get_transaction_id(),
    )


@router.get("/check-name/{name}", response_model=bool)
def check_name(name: str, db: DbSession) -> bool:
    return role_service.role_name_exists(db, name)


@router.post("/users/{user_id}/assign", response_model=UserResponse)
def assign_roles(user_id: int, role_names: RoleNames, db: DbSession) -> UserResponse:
    """Add roles to a user. Fails with 404 if any name is unknown."""
    return UserResponse.model_validate(role_service.assign_roles_to_user(db, user_id, role_names))


@router.post("/users/{user_id}/remove", response_model=UserResponse)
def remove_roles(user_id: int, role_names: RoleNames, db: DbSession) -> UserResponse:
    """Remove roles from a user; unknown names are ignored."""
    return UserResponse.model_validate(role_service.remove_roles_from_user(db, user_id, role_names))


@router.get("/users/{user_id}", response_model=list[RoleResponse])
def get_user_roles(user_id: int, db: DbSession) -> list[RoleResponse]:
    """Active roles of a user."""
    return [RoleResponse.model_validate(r) for r in role_service.get_user_roles(db, user_id)]


@router.get("/users/{user_id}/names", response_model=list[str])
def get_user_role_names(user_id: int, db: DbSession) -> list[str]:
    return role_service.get_user_role_names(db, user_id)


@router.get("/users/{user_id}/has-role/{role_name}", response_model=bool)
def user_has_role(user_id: int, role_name: str, db: DbSession) -> bool:
    return role_service.user_has_role(db, user_id, role_name)


@router.get("/{role_id}", response_model=RoleResponse)
def get_role(role_id: int, db: DbSession) -> RoleResponse:
    role = role_service.get_role(db, role_id)
    if role is None:
        raise NotFoundError(f"Role not found with id: {role_id}")
    return RoleResponse.model_validate(role)


@router.put("/{role_id}", response_model=RoleResponse)
def update_role(role_id: int, body: RoleUpdate, db: DbSession) -> RoleResponse:
    return RoleResponse.model_validate(role_service.update_role(db, role_id, body))


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role(role_id: int, db: DbSession) -> Response:
    role_service.delete_role(db, role_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
