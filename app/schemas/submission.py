from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from app.schemas.assignment import Attachment, AssignmentSummary, UtcDatetime
from app.schemas.user import StudentProfile


class SubmissionStatus(str, Enum):
    SUBMITTED = "submitted"
    GRADED = "graded"
    # nessuna operazione porta ancora in questo stato
    RETURNED = "returned"


class SubmissionCreate(BaseModel):
    assignmentId: str
    content: Optional[str] = None
    attachments: List[Attachment] = []


class GradeRequest(BaseModel):
    grade: float
    feedback: Optional[str] = None


class Submission(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    submissionId: str
    assignmentId: str
    studentId: str
    content: Optional[str] = None
    attachments: List[Attachment] = []
    submittedAt: UtcDatetime
    isLate: bool = False
    grade: Optional[float] = None
    feedback: Optional[str] = None
    status: SubmissionStatus = SubmissionStatus.SUBMITTED
    createdAt: UtcDatetime
    updatedAt: UtcDatetime


class SubmissionWithAssignment(Submission):
    # None se l'assignment padre e' stato cancellato
    assignment: Optional[AssignmentSummary] = None


class SubmissionWithStudent(Submission):
    # None se lo studente non e' (piu') nella directory utenti
    student: Optional[StudentProfile] = None
