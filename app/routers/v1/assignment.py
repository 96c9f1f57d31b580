from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.core.deps import get_attachment_store, get_repository, get_user_repository
from app.core.errors import ServiceError, to_http_exception
from app.database.assignment_repo import AssignmentRepo
from app.database.user_repo import UserRepo
from app.schemas.assignment import Assignment, AssignmentCreate, AssignmentUpdate, DeletionReport
from app.schemas.context import UserContext
from app.schemas.user import StudentProfile
from app.services.assignment_service import AssignmentService
from app.services.attachment_store import AttachmentStore
from app.services.auth_service import AuthService


router = APIRouter()

RepoDep = Annotated[AssignmentRepo, Depends(get_repository)]
UserRepoDep = Annotated[UserRepo, Depends(get_user_repository)]
StoreDep = Annotated[AttachmentStore, Depends(get_attachment_store)]
UserDep = Annotated[UserContext, Depends(AuthService.get_current_user)]


@router.post("/assignments", status_code=status.HTTP_201_CREATED, response_model=Assignment)
async def create_assignment_endpoint(
    assignment: AssignmentCreate,
    user: UserDep,
    repo: RepoDep,
):
    try:
        created = await AssignmentService.create_assignment(assignment, user, repo)
    except ServiceError as e:
        raise to_http_exception(e)

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=created.model_dump(mode="json"),
        headers={"Location": f"/api/v1/assignments/{created.assignmentId}"},
    )


@router.get("/assignments", response_model=list[Assignment])
async def list_assignments_endpoint(
    user: UserDep,
    repo: RepoDep,
):
    return await AssignmentService.list_assignments(user, repo)


@router.get("/assignments/students", response_model=list[StudentProfile])
async def list_students_endpoint(
    user: UserDep,
    user_repo: UserRepoDep,
):
    try:
        return await AssignmentService.list_students(user, user_repo)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/assignments/{assignment_id}", response_model=Assignment)
async def get_assignment_endpoint(
    assignment_id: str,
    user: UserDep,
    repo: RepoDep,
):
    try:
        return await AssignmentService.get_assignment(assignment_id, user, repo)
    except ServiceError as e:
        raise to_http_exception(e)


@router.patch("/assignments/{assignment_id}", response_model=Assignment)
async def update_assignment_endpoint(
    assignment_id: str,
    patch: AssignmentUpdate,
    user: UserDep,
    repo: RepoDep,
):
    try:
        return await AssignmentService.update_assignment(assignment_id, patch, user, repo)
    except ServiceError as e:
        raise to_http_exception(e)


@router.delete("/assignments/{assignment_id}", response_model=DeletionReport)
async def delete_assignment_endpoint(
    assignment_id: str,
    user: UserDep,
    repo: RepoDep,
    store: StoreDep,
):
    try:
        return await AssignmentService.delete_assignment(assignment_id, user, repo, store)
    except ServiceError as e:
        raise to_http_exception(e)
