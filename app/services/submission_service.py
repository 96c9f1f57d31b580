import logging
import uuid
from datetime import datetime
from typing import List, Optional, Sequence

from app.core.errors import AccessDeniedError, DuplicateError, NotFoundError
from app.database.assignment_repo import AssignmentRepo
from app.database.submission_repo import SubmissionRepo
from app.database.user_repo import UserRepo
from app.schemas.assignment import AssignmentSummary
from app.schemas.context import UserContext
from app.schemas.submission import (
    Submission,
    SubmissionCreate,
    SubmissionStatus,
    SubmissionWithAssignment,
    SubmissionWithStudent,
)
from app.services import validation
from app.services.access import is_owner, is_student, is_teacher, is_visible_to
from app.services.assignment_service import utcnow

logger = logging.getLogger("classroom.submissions")


def create_submission_id() -> str:
    return f"sub-{uuid.uuid4().hex}"


async def _with_students(submissions: Sequence[Submission], user_repo: UserRepo) -> List[SubmissionWithStudent]:
    profiles = await user_repo.find_many(s.studentId for s in submissions)
    by_id = {p.userId: p for p in profiles}
    return [SubmissionWithStudent(**s.model_dump(), student=by_id.get(s.studentId)) for s in submissions]


class SubmissionService:
    """
    Registro delle consegne: una sola submission per (assignment, studente),
    ritardo calcolato una volta sola alla consegna, voto scritto dal teacher proprietario.
    """

    @staticmethod
    async def submit(
        data: SubmissionCreate,
        user: UserContext,
        assignment_repo: AssignmentRepo,
        submission_repo: SubmissionRepo,
        now: Optional[datetime] = None,
    ) -> Submission:
        if not is_student(user):
            raise AccessDeniedError("only_students_can_submit")

        assignment = await assignment_repo.find_one(data.assignmentId)
        if not assignment:
            raise NotFoundError("assignment_not_found")
        if not is_visible_to(assignment, user.user_id):
            raise AccessDeniedError("not_assigned_to_student")
        if await submission_repo.find_by_pair(assignment.assignmentId, user.user_id):
            raise DuplicateError("already_submitted", field="assignmentId")

        content = validation.validate_content(data.content)

        now = now or utcnow()
        submission = Submission(
            submissionId=create_submission_id(),
            assignmentId=assignment.assignmentId,
            studentId=str(user.user_id),
            content=content,
            attachments=list(data.attachments),
            submittedAt=now,
            # fatto congelato: non si ricalcola se la scadenza cambia dopo
            isLate=now > assignment.dueDate,
            status=SubmissionStatus.SUBMITTED,
            createdAt=now,
            updatedAt=now,
        )

        # il vincolo unico dello storage chiude la finestra tra check e insert
        await submission_repo.create(submission)
        if submission.isLate:
            logger.warning(
                "Submission %s in ritardo per assignment %s (studente %s)",
                submission.submissionId, assignment.assignmentId, submission.studentId,
            )
        else:
            logger.info("Submission %s creata per assignment %s", submission.submissionId, assignment.assignmentId)
        return submission

    @staticmethod
    async def grade_submission(
        submission_id: str,
        grade: float,
        feedback: Optional[str],
        user: UserContext,
        assignment_repo: AssignmentRepo,
        submission_repo: SubmissionRepo,
        user_repo: UserRepo,
        now: Optional[datetime] = None,
    ) -> SubmissionWithStudent:
        submission = await submission_repo.find_one(submission_id)
        if not submission:
            raise NotFoundError("submission_not_found")

        # maxMarks riletto adesso, non quello del momento della consegna
        assignment = await assignment_repo.find_one(submission.assignmentId)
        if not assignment:
            raise NotFoundError("assignment_not_found")
        if not is_owner(assignment, user.user_id):
            raise AccessDeniedError("not_assignment_owner")

        validation.validate_grade(grade, assignment.maxMarks)
        validation.validate_feedback(feedback)

        updated = await submission_repo.update_grade(
            submission_id, grade, feedback, SubmissionStatus.GRADED.value, now or utcnow()
        )
        if updated is None:
            raise NotFoundError("submission_not_found")
        logger.info("Submission %s valutata %s/%s da %s", submission_id, grade, assignment.maxMarks, user.user_id)
        return (await _with_students([updated], user_repo))[0]

    @staticmethod
    async def list_for_assignment(
        assignment_id: str,
        user: UserContext,
        assignment_repo: AssignmentRepo,
        submission_repo: SubmissionRepo,
        user_repo: UserRepo,
    ) -> List[SubmissionWithStudent]:
        assignment = await assignment_repo.find_one(assignment_id)
        if not assignment:
            raise NotFoundError("assignment_not_found")
        if not is_owner(assignment, user.user_id):
            raise AccessDeniedError("not_assignment_owner")
        submissions = await submission_repo.find_for_assignment(assignment_id)
        return await _with_students(submissions, user_repo)

    @staticmethod
    async def list_for_student(
        user: UserContext,
        assignment_repo: AssignmentRepo,
        submission_repo: SubmissionRepo,
    ) -> List[SubmissionWithAssignment]:
        submissions = await submission_repo.find_for_student(user.user_id)
        parents = await assignment_repo.find_many(s.assignmentId for s in submissions)
        by_id = {a.assignmentId: AssignmentSummary.of(a) for a in parents}
        return [
            SubmissionWithAssignment(**s.model_dump(), assignment=by_id.get(s.assignmentId))
            for s in submissions
        ]

    @staticmethod
    async def get_submission(
        submission_id: str,
        user: UserContext,
        assignment_repo: AssignmentRepo,
        submission_repo: SubmissionRepo,
        user_repo: UserRepo,
    ) -> SubmissionWithStudent:
        submission = await submission_repo.find_one(submission_id)
        if not submission:
            raise NotFoundError("submission_not_found")

        allowed = is_student(user) and submission.studentId == user.user_id
        if not allowed and is_teacher(user):
            assignment = await assignment_repo.find_one(submission.assignmentId)
            allowed = bool(assignment) and is_owner(assignment, user.user_id)
        if not allowed:
            raise AccessDeniedError("not_submission_participant")
        return (await _with_students([submission], user_repo))[0]
