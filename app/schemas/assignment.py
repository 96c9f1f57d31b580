from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional, Union

from pydantic import AfterValidator, BaseModel, Field


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # datetime naive dal client: lo consideriamo UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class Attachment(BaseModel):
    filename: str
    url: str
    storageId: Optional[str] = None


class AllStudents(BaseModel):
    kind: Literal["all"] = "all"


class IndividualStudents(BaseModel):
    kind: Literal["individual"] = "individual"
    students: List[str] = []


Visibility = Annotated[Union[AllStudents, IndividualStudents], Field(discriminator="kind")]


class AssignmentCreate(BaseModel):
    title: str
    description: str
    dueDate: UtcDatetime
    visibility: Visibility = AllStudents()
    maxMarks: float = 100
    attachments: List[Attachment] = []


class AssignmentUpdate(BaseModel):
    """Patch parziale: solo i campi valorizzati vengono modificati."""

    title: Optional[str] = None
    description: Optional[str] = None
    dueDate: Optional[UtcDatetime] = None
    visibility: Optional[Visibility] = None
    maxMarks: Optional[float] = None
    attachments: List[Attachment] = []


class Assignment(BaseModel):
    assignmentId: str
    title: str
    description: str
    dueDate: UtcDatetime
    visibility: Visibility = AllStudents()
    maxMarks: float = 100
    attachments: List[Attachment] = []
    createdBy: str
    createdAt: UtcDatetime
    updatedAt: UtcDatetime


class AssignmentSummary(BaseModel):
    assignmentId: str
    title: str
    dueDate: UtcDatetime
    maxMarks: float
    createdBy: str

    @classmethod
    def of(cls, a: Assignment) -> "AssignmentSummary":
        return cls(
            assignmentId=a.assignmentId,
            title=a.title,
            dueDate=a.dueDate,
            maxMarks=a.maxMarks,
            createdBy=a.createdBy,
        )


class ReleaseFailure(BaseModel):
    storageId: str
    reason: str


class DeletionReport(BaseModel):
    assignmentId: str
    deleted: bool = True
    releaseFailures: List[ReleaseFailure] = []
