import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from app.core.errors import DuplicateError
from app.schemas.assignment import Assignment, AssignmentCreate
from app.schemas.context import UserContext
from app.schemas.submission import Submission
from app.schemas.user import StudentProfile


# ------------------------- Fake repositories -------------------------
class FakeAssignmentRepo:
    def __init__(self):
        self.items: dict[str, Assignment] = {}

    @staticmethod
    def _newest_first(items):
        return sorted(items, key=lambda a: (a.createdAt, a.assignmentId), reverse=True)

    async def create(self, assignment: Assignment) -> str:
        if not getattr(assignment, "assignmentId", None):
            raise ValueError("assignmentId must be set by the service")
        self.items[assignment.assignmentId] = assignment.model_copy(deep=True)
        return assignment.assignmentId

    async def find_for_teacher(self, teacher_id: str):
        return self._newest_first(a for a in self.items.values() if a.createdBy == teacher_id)

    async def find_for_student(self, student_id: str):
        def visible(a):
            v = a.visibility
            return v.kind == "all" or student_id in v.students
        return self._newest_first(a for a in self.items.values() if visible(a))

    async def find_one(self, assignment_id: str):
        a = self.items.get(assignment_id)
        return a.model_copy(deep=True) if a else None

    async def find_many(self, assignment_ids):
        return [self.items[i] for i in set(assignment_ids) if i in self.items]

    async def update(self, assignment_id, fields, new_attachments):
        current = self.items.get(assignment_id)
        if current is None:
            return None
        data = current.model_dump()
        data.update(fields)
        data["attachments"] = data["attachments"] + [a.model_dump() for a in new_attachments]
        self.items[assignment_id] = Assignment(**data)
        return self.items[assignment_id].model_copy(deep=True)

    async def delete(self, assignment_id: str):
        return self.items.pop(assignment_id, None) is not None


class FakeSubmissionRepo:
    """Stesso contratto del repo Mongo, incluso il vincolo unico (assignmentId, studentId)."""

    def __init__(self):
        self.items: dict[str, Submission] = {}

    @staticmethod
    def _newest_first(items):
        return sorted(items, key=lambda s: (s.submittedAt, s.submissionId), reverse=True)

    async def create(self, submission: Submission) -> str:
        for s in self.items.values():
            if (s.assignmentId, s.studentId) == (submission.assignmentId, submission.studentId):
                raise DuplicateError("already_submitted", field="assignmentId")
        self.items[submission.submissionId] = submission.model_copy(deep=True)
        return submission.submissionId

    async def find_one(self, submission_id: str):
        s = self.items.get(submission_id)
        return s.model_copy(deep=True) if s else None

    async def find_by_pair(self, assignment_id: str, student_id: str):
        for s in self.items.values():
            if s.assignmentId == assignment_id and s.studentId == student_id:
                return s.model_copy(deep=True)
        return None

    async def find_for_assignment(self, assignment_id: str):
        return self._newest_first(s for s in self.items.values() if s.assignmentId == assignment_id)

    async def find_for_student(self, student_id: str):
        return self._newest_first(s for s in self.items.values() if s.studentId == student_id)

    async def update_grade(self, submission_id, grade, feedback, status, ts):
        s = self.items.get(submission_id)
        if s is None:
            return None
        updated = s.model_copy(update={"grade": grade, "feedback": feedback, "status": status, "updatedAt": ts})
        self.items[submission_id] = updated
        return updated.model_copy(deep=True)



class YieldingSubmissionRepo(FakeSubmissionRepo):
    """Cede il loop dopo il controllo della coppia: due submit concorrenti passano entrambi il pre-check."""

    def __init__(self):
        super().__init__()
        self.create_calls = 0

    async def create(self, submission: Submission) -> str:
        self.create_calls += 1
        return await super().create(submission)

    async def find_by_pair(self, assignment_id: str, student_id: str):
        found = await super().find_by_pair(assignment_id, student_id)
        await asyncio.sleep(0)
        return found


class FakeUserRepo:
    def __init__(self, students=None):
        self.students = list(students or [])

    async def find_students(self):
        return list(self.students)

    async def find_many(self, user_ids):
        wanted = set(user_ids)
        return [s for s in self.students if s.userId in wanted]


class FakeAttachmentStore:
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.released: list[str] = []

    async def release(self, storage_id: str) -> None:
        self.released.append(storage_id)
        if storage_id in self.failing:
            raise ConnectionError(f"blob store unreachable for {storage_id}")


# ------------------------------- Fixtures -------------------------------------
@pytest.fixture
def repo():
    return FakeAssignmentRepo()

@pytest.fixture
def submissions():
    return FakeSubmissionRepo()

@pytest.fixture
def yielding_submissions():
    return YieldingSubmissionRepo()

@pytest.fixture
def user_repo():
    return FakeUserRepo([
        StudentProfile(userId="s1", name="Anna", email="anna@school.test", studentId="R-001"),
        StudentProfile(userId="s2", name="Bruno", email="bruno@school.test"),
    ])

@pytest.fixture
def empty_user_repo():
    return FakeUserRepo()

@pytest.fixture
def store():
    return FakeAttachmentStore()

@pytest.fixture
def failing_store():
    return FakeAttachmentStore(failing={"blob-a"})

@pytest.fixture
def teacher():
    return UserContext(user_id="t1", role="teacher")

@pytest.fixture
def other_teacher():
    return UserContext(user_id="t2", role="teacher")

@pytest.fixture
def student():
    return UserContext(user_id="s1", role="student")

@pytest.fixture
def student2():
    return UserContext(user_id="s2", role="student")


def _make_create(**overrides) -> AssignmentCreate:
    future = datetime.now(timezone.utc) + timedelta(days=7)
    base = dict(
        title="Compito",
        description="Desc",
        dueDate=future,
    )
    base.update(overrides)
    return AssignmentCreate(**base)


@pytest.fixture
def make_create():
    return _make_create
