# app/database/mongo_submission.py
from datetime import datetime
from typing import List, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.core.errors import DuplicateError
from app.database.submission_repo import SubmissionRepo
from app.schemas.submission import Submission

NEWEST_SUBMITTED_FIRST = [("submittedAt", DESCENDING), ("submissionId", DESCENDING)]


class MongoSubmissionRepository(SubmissionRepo):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db["submissions"]

    def _from_doc(self, d: dict) -> Submission:
        base = {k: v for k, v in d.items() if k not in {"_id"}}
        return Submission(**base)

    async def create(self, submission: Submission) -> str:
        try:
            await self.col.insert_one(submission.model_dump())
        except DuplicateKeyError as e:
            raise DuplicateError("already_submitted", field="assignmentId") from e
        return submission.submissionId

    async def find_one(self, submission_id: str) -> Optional[Submission]:
        d = await self.col.find_one({"submissionId": str(submission_id)})
        return self._from_doc(d) if d else None

    async def find_by_pair(self, assignment_id: str, student_id: str) -> Optional[Submission]:
        d = await self.col.find_one({"assignmentId": str(assignment_id), "studentId": str(student_id)})
        return self._from_doc(d) if d else None

    async def find_for_assignment(self, assignment_id: str) -> Sequence[Submission]:
        cursor = self.col.find({"assignmentId": str(assignment_id)}).sort(NEWEST_SUBMITTED_FIRST)
        docs: List[dict] = [d async for d in cursor]
        return [self._from_doc(d) for d in docs]

    async def find_for_student(self, student_id: str) -> Sequence[Submission]:
        cursor = self.col.find({"studentId": str(student_id)}).sort(NEWEST_SUBMITTED_FIRST)
        docs: List[dict] = [d async for d in cursor]
        return [self._from_doc(d) for d in docs]

    async def update_grade(
        self,
        submission_id: str,
        grade: float,
        feedback: Optional[str],
        status: str,
        ts: datetime,
    ) -> Optional[Submission]:
        d = await self.col.find_one_and_update(
            {"submissionId": str(submission_id)},
            {"$set": {"grade": grade, "feedback": feedback, "status": status, "updatedAt": ts}},
            return_document=ReturnDocument.AFTER,
        )
        return self._from_doc(d) if d else None

    async def ensure_indexes(self):
        await self.col.create_index("submissionId", unique=True)
        # una sola submission per coppia (assignment, studente)
        await self.col.create_index(
            [("assignmentId", 1), ("studentId", 1)],
            unique=True,
            name="uq_assignment_student",
        )
        await self.col.create_index([("studentId", 1), ("submittedAt", -1)])
