from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_current_user, get_db_session, not_found, require_permission
from src.api.schemas.catalog import CourseCreate, CourseResponse, CourseUpdate
from src.api.schemas.users import ActionResponse
from src.domain.models import Identity
from src.domain.errors import NotFoundError
from src.domain.services.catalog import CourseService
from src.infrastructure.db.models import TrainingType

router = APIRouter(prefix="/courses", tags=["Courses"])

manage_courses = require_permission(
    "create_courses", detail="Only HR super admins can manage courses"
)


@router.get("", response_model=list[CourseResponse])
async def list_courses(
    active_only: bool = False,
    training_type: TrainingType | None = None,
    session: AsyncSession = Depends(get_db_session),
    user: Identity = Depends(get_current_user),
) -> list[CourseResponse]:
    """Return the course catalog, optionally only active courses."""
    courses = await CourseService(session).list_courses(
        active_only=active_only, training_type=training_type
    )
    return [CourseResponse.model_validate(course) for course in courses]


@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    payload: CourseCreate,
    session: AsyncSession = Depends(get_db_session),
    user: Identity = Depends(manage_courses),
) -> CourseResponse:
    try:
        course = await CourseService(session).create_course(user, payload.model_dump())
    except NotFoundError as exc:
        raise not_found(str(exc)) from exc
    return CourseResponse.model_validate(course)


@router.get("/{course_id}", response_model=CourseResponse)
async def get_course(
    course_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: Identity = Depends(get_current_user),
) -> CourseResponse:
    try:
        course = await CourseService(session).get_course(course_id)
    except NotFoundError as exc:
        raise not_found(str(exc)) from exc
    return CourseResponse.model_validate(course)


@router.patch("/{course_id}", response_model=CourseResponse)
async def update_course(
    course_id: str,
    payload: CourseUpdate,
    session: AsyncSession = Depends(get_db_session),
    user: Identity = Depends(manage_courses),
) -> CourseResponse:
    """Partial update; setting ``is_active`` to false hides the course from active listings."""
    try:
        course = await CourseService(session).update_course(
            user, course_id, payload.model_dump(exclude_unset=True)
        )
    except NotFoundError as exc:
        raise not_found(str(exc)) from exc
    return CourseResponse.model_validate(course)


@router.delete("/{course_id}", response_model=ActionResponse)
async def delete_course(
    course_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: Identity = Depends(manage_courses),
) -> ActionResponse:
    try:
        await CourseService(session).delete_course(user, course_id)
    except NotFoundError as exc:
        raise not_found(str(exc)) from exc
    return ActionResponse(message="Course deleted")
