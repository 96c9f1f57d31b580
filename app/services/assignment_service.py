import logging
import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence

from app.core.errors import AccessDeniedError, NotFoundError
from app.database.assignment_repo import AssignmentRepo
from app.database.user_repo import UserRepo
from app.schemas.assignment import (
    AllStudents,
    Assignment,
    AssignmentCreate,
    AssignmentUpdate,
    DeletionReport,
    IndividualStudents,
    ReleaseFailure,
)
from app.schemas.context import UserContext
from app.schemas.user import StudentProfile
from app.services import validation
from app.services.access import is_owner, is_student, is_teacher, is_visible_to
from app.services.attachment_store import AttachmentStore

logger = logging.getLogger("classroom.assignments")


def create_assignment_id() -> str:
    return f"as-{uuid.uuid4().hex}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _warn_if_empty_individual(assignment_id: str, visibility) -> None:
    if isinstance(visibility, IndividualStudents) and not visibility.students:
        logger.warning("Assignment %s individuale senza studenti: non visibile a nessuno", assignment_id)


class AssignmentService:

    @staticmethod
    async def create_assignment(
        data: AssignmentCreate,
        user: UserContext,
        repo: AssignmentRepo,
        now: Optional[datetime] = None,
    ) -> Assignment:
        if not is_teacher(user):
            raise AccessDeniedError("only_teachers_can_create")

        now = now or utcnow()
        title = validation.validate_title(data.title)
        description = validation.validate_description(data.description)
        due_date = validation.validate_due_date(data.dueDate, now)
        max_marks = validation.validate_max_marks(data.maxMarks)

        assignment = Assignment(
            assignmentId=create_assignment_id(),
            title=title,
            description=description,
            dueDate=due_date,
            visibility=data.visibility,
            maxMarks=max_marks,
            attachments=list(data.attachments),
            createdBy=str(user.user_id),
            createdAt=now,
            updatedAt=now,
        )
        _warn_if_empty_individual(assignment.assignmentId, assignment.visibility)

        await repo.create(assignment)
        logger.info("Assignment %s creato da %s", assignment.assignmentId, assignment.createdBy)
        return assignment

    @staticmethod
    async def list_assignments(user: UserContext, repo: AssignmentRepo) -> Sequence[Assignment]:
        if is_teacher(user):
            return await repo.find_for_teacher(user.user_id)
        if is_student(user):
            return await repo.find_for_student(user.user_id)
        return []

    @staticmethod
    async def get_assignment(assignment_id: str, user: UserContext, repo: AssignmentRepo) -> Assignment:
        doc = await repo.find_one(assignment_id)
        if not doc:
            raise NotFoundError("assignment_not_found")
        if is_student(user) and not is_teacher(user) and not is_visible_to(doc, user.user_id):
            raise AccessDeniedError("not_assigned_to_student")
        return doc

    @staticmethod
    async def update_assignment(
        assignment_id: str,
        patch: AssignmentUpdate,
        user: UserContext,
        repo: AssignmentRepo,
        now: Optional[datetime] = None,
    ) -> Assignment:
        doc = await repo.find_one(assignment_id)
        if not doc:
            raise NotFoundError("assignment_not_found")
        if not is_owner(doc, user.user_id):
            raise AccessDeniedError("not_assignment_owner")

        now = now or utcnow()
        fields: dict[str, Any] = {}
        if patch.title is not None:
            fields["title"] = validation.validate_title(patch.title)
        if patch.description is not None:
            fields["description"] = validation.validate_description(patch.description)
        if patch.dueDate is not None:
            fields["dueDate"] = validation.validate_due_date(patch.dueDate, now)
        if patch.maxMarks is not None:
            fields["maxMarks"] = validation.validate_max_marks(patch.maxMarks)
        if patch.visibility is not None:
            # 'all' azzera il set di studenti, 'individual' lo sostituisce
            if isinstance(patch.visibility, AllStudents):
                fields["visibility"] = AllStudents().model_dump()
            else:
                visibility = patch.visibility
                # 'individual' senza chiave students: resta il set attuale
                if "students" not in visibility.model_fields_set and isinstance(doc.visibility, IndividualStudents):
                    visibility = IndividualStudents(students=list(doc.visibility.students))
                fields["visibility"] = visibility.model_dump()
                _warn_if_empty_individual(assignment_id, visibility)
        fields["updatedAt"] = now

        updated = await repo.update(assignment_id, fields, list(patch.attachments))
        if updated is None:
            # cancellato tra la lettura e l'update
            raise NotFoundError("assignment_not_found")
        logger.info("Assignment %s aggiornato (%s)", assignment_id, ", ".join(sorted(fields)))
        return updated

    @staticmethod
    async def delete_assignment(
        assignment_id: str,
        user: UserContext,
        repo: AssignmentRepo,
        store: AttachmentStore,
    ) -> DeletionReport:
        doc = await repo.find_one(assignment_id)
        if not doc:
            raise NotFoundError("assignment_not_found")
        if not is_owner(doc, user.user_id):
            raise AccessDeniedError("not_assignment_owner")

        if not await repo.delete(assignment_id):
            raise NotFoundError("assignment_not_found")
        logger.info("Assignment %s cancellato da %s", assignment_id, user.user_id)

        # il record e' gia' cancellato: i fallimenti dei blob sono solo warning
        failures: List[ReleaseFailure] = []
        for attachment in doc.attachments:
            if not attachment.storageId:
                continue
            try:
                await store.release(attachment.storageId)
            except Exception as e:
                logger.exception("Release fallito per blob %s", attachment.storageId)
                failures.append(ReleaseFailure(storageId=attachment.storageId, reason=str(e) or type(e).__name__))

        return DeletionReport(assignmentId=assignment_id, releaseFailures=failures)

    @staticmethod
    async def list_students(user: UserContext, user_repo: UserRepo) -> Sequence[StudentProfile]:
        if not is_teacher(user):
            raise AccessDeniedError("only_teachers_can_list_students")
        return await user_repo.find_students()
