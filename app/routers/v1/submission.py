from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.core.deps import get_repository, get_submission_repository, get_user_repository
from app.core.errors import ServiceError, to_http_exception
from app.database.assignment_repo import AssignmentRepo
from app.database.submission_repo import SubmissionRepo
from app.database.user_repo import UserRepo
from app.schemas.context import UserContext
from app.schemas.submission import (
    GradeRequest,
    Submission,
    SubmissionCreate,
    SubmissionWithAssignment,
    SubmissionWithStudent,
)
from app.services.auth_service import AuthService
from app.services.submission_service import SubmissionService


router = APIRouter()

AssignmentRepoDep = Annotated[AssignmentRepo, Depends(get_repository)]
SubmissionRepoDep = Annotated[SubmissionRepo, Depends(get_submission_repository)]
UserRepoDep = Annotated[UserRepo, Depends(get_user_repository)]
UserDep = Annotated[UserContext, Depends(AuthService.get_current_user)]


@router.post("/submissions", status_code=status.HTTP_201_CREATED, response_model=Submission)
async def submit_endpoint(
    body: SubmissionCreate,
    user: UserDep,
    assignments: AssignmentRepoDep,
    submissions: SubmissionRepoDep,
):
    try:
        created = await SubmissionService.submit(body, user, assignments, submissions)
    except ServiceError as e:
        raise to_http_exception(e)

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=created.model_dump(mode="json"),
        headers={"Location": f"/api/v1/submissions/{created.submissionId}"},
    )


@router.get("/submissions/mine", response_model=list[SubmissionWithAssignment])
async def my_submissions_endpoint(
    user: UserDep,
    assignments: AssignmentRepoDep,
    submissions: SubmissionRepoDep,
):
    return await SubmissionService.list_for_student(user, assignments, submissions)


@router.get("/submissions/assignment/{assignment_id}", response_model=list[SubmissionWithStudent])
async def assignment_submissions_endpoint(
    assignment_id: str,
    user: UserDep,
    assignments: AssignmentRepoDep,
    submissions: SubmissionRepoDep,
    users: UserRepoDep,
):
    try:
        return await SubmissionService.list_for_assignment(assignment_id, user, assignments, submissions, users)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/submissions/{submission_id}", response_model=SubmissionWithStudent)
async def get_submission_endpoint(
    submission_id: str,
    user: UserDep,
    assignments: AssignmentRepoDep,
    submissions: SubmissionRepoDep,
    users: UserRepoDep,
):
    try:
        return await SubmissionService.get_submission(submission_id, user, assignments, submissions, users)
    except ServiceError as e:
        raise to_http_exception(e)


@router.put("/submissions/{submission_id}/grade", response_model=SubmissionWithStudent)
async def grade_submission_endpoint(
    submission_id: str,
    body: GradeRequest,
    user: UserDep,
    assignments: AssignmentRepoDep,
    submissions: SubmissionRepoDep,
    users: UserRepoDep,
):
    try:
        return await SubmissionService.grade_submission(
            submission_id, body.grade, body.feedback, user, assignments, submissions, users
        )
    except ServiceError as e:
        raise to_http_exception(e)
