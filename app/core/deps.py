from fastapi import Request

from app.database.assignment_repo import AssignmentRepo
from app.database.submission_repo import SubmissionRepo
from app.database.user_repo import UserRepo
from app.services.attachment_store import AttachmentStore


def _from_state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise RuntimeError(f"{name} non inizializzato")
    return value


def get_repository(request: Request) -> AssignmentRepo:
    return _from_state(request, "assignment_repo")


def get_submission_repository(request: Request) -> SubmissionRepo:
    return _from_state(request, "submission_repo")


def get_user_repository(request: Request) -> UserRepo:
    return _from_state(request, "user_repo")


def get_attachment_store(request: Request) -> AttachmentStore:
    return _from_state(request, "attachment_store")
