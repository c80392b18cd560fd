"""Employee account routes, including the Excel bulk import."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import (
    bad_request,
    conflict,
    forbidden,
    get_db_session,
    not_found,
    require_permission,
)
from src.api.schemas.users import (
    ActionResponse,
    AssignableRole,
    ImportResultResponse,
    ResetPasswordRequest,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from src.domain.models import Identity
from src.domain.errors import (
    ConflictError,
    ImportFileError,
    NotFoundError,
    PermissionDeniedError,
)
from src.domain.permissions import get_role_display_name, get_roles_user_can_assign
from src.domain.services.user_import import UserImportService
from src.domain.services.users import EmptyUpdateError, PasswordPolicyError, UserService

router = APIRouter(prefix="/users", tags=["Users"])

manage_employees = require_permission("manage_employees")
import_excel = require_permission("import_excel")


@router.get("", response_model=list[UserResponse])
async def list_users(
    active_only: bool = False,
    session: AsyncSession = Depends(get_db_session),
    user: Identity = Depends(manage_employees),
) -> list[UserResponse]:
    """List all accounts ordered by creation time."""
    users = await UserService(session).list_users(active_only=active_only)
    return [UserResponse.model_validate(item) for item in users]


@router.get("/assignable-roles", response_model=list[AssignableRole])
async def assignable_roles(user: Identity = Depends(manage_employees)) -> list[AssignableRole]:
    """Roles the current user may grant, with their display names."""
    return [
        AssignableRole(value=role, display_name=get_role_display_name(role))
        for role in get_roles_user_can_assign(user.role)
    ]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    session: AsyncSession = Depends(get_db_session),
    user: Identity = Depends(manage_employees),
) -> UserResponse:
    service = UserService(session)

    try:
        created = await service.create_user(
            user,
            employee_id=payload.employee_id,
            password=payload.password,
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            role=payload.role,
        )
    except PermissionDeniedError as exc:
        raise forbidden(str(exc)) from exc
    except ConflictError as exc:
        raise conflict(str(exc)) from exc

    return UserResponse.model_validate(created)


@router.post("/import", response_model=ImportResultResponse)
async def import_users(
    file: UploadFile = File(...),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),
    user: Identity = Depends(import_excel),
) -> ImportResultResponse:
    """Create accounts from the first sheet of an .xlsx/.xls workbook."""
    content = await file.read()
    service = UserImportService(session)

    try:
        result = await service.import_workbook(
            user, filename=file.filename or "", content=content
        )
    except ImportFileError as exc:
        raise bad_request(str(exc)) from exc

    return ImportResultResponse.model_validate(result)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: Identity = Depends(manage_employees),
) -> UserResponse:
    try:
        found = await UserService(session).get_user(user_id)
    except NotFoundError as exc:
        raise not_found(str(exc)) from exc
    return UserResponse.model_validate(found)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    payload: UserUpdate,
    session: AsyncSession = Depends(get_db_session),
    user: Identity = Depends(manage_employees),
) -> UserResponse:
    """Update name, email, role or active flag of an account."""
    service = UserService(session)

    try:
        updated = await service.update_user(
            user, user_id, payload.model_dump(exclude_unset=True)
        )
    except EmptyUpdateError as exc:
        raise bad_request(str(exc)) from exc
    except NotFoundError as exc:
        raise not_found(str(exc)) from exc
    except PermissionDeniedError as exc:
        raise forbidden(str(exc)) from exc

    return UserResponse.model_validate(updated)


@router.post("/{user_id}/reset-password", response_model=ActionResponse)
async def reset_password(
    user_id: str,
    payload: ResetPasswordRequest,
    session: AsyncSession = Depends(get_db_session),
    user: Identity = Depends(manage_employees),
) -> ActionResponse:
    service = UserService(session)

    try:
        await service.reset_password(user, user_id, payload.password)
    except PasswordPolicyError as exc:
        raise bad_request(str(exc)) from exc
    except NotFoundError as exc:
        raise not_found(str(exc)) from exc
    except PermissionDeniedError as exc:
        raise forbidden(str(exc)) from exc

    return ActionResponse(message="Password changed successfully")
