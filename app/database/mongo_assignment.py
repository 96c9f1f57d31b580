# app/database/mongo_assignment.py
from typing import Any, Iterable, List, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from app.database.assignment_repo import AssignmentRepo
from app.schemas.assignment import Assignment, Attachment

NEWEST_FIRST = [("createdAt", DESCENDING), ("assignmentId", DESCENDING)]


class MongoAssignmentRepository(AssignmentRepo):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db["assignments"]

    def _from_doc(self, d: dict) -> Assignment:
        base = {k: v for k, v in d.items() if k not in {"_id"}}
        return Assignment(**base)

    def _to_doc_from_model(self, a: Assignment) -> dict:
        return a.model_dump()

    async def create(self, assignment: Assignment) -> str:
        doc = self._to_doc_from_model(assignment)
        await self.col.insert_one(doc)
        return assignment.assignmentId

    async def find_for_teacher(self, teacher_id: str) -> Sequence[Assignment]:
        cursor = self.col.find({"createdBy": str(teacher_id)}).sort(NEWEST_FIRST)
        docs: List[dict] = [d async for d in cursor]
        return [self._from_doc(d) for d in docs]

    async def find_for_student(self, student_id: str) -> Sequence[Assignment]:
        filt = {
            "$or": [
                {"visibility.kind": "all"},
                {"visibility.kind": "individual", "visibility.students": str(student_id)},
            ]
        }
        cursor = self.col.find(filt).sort(NEWEST_FIRST)
        docs: List[dict] = [d async for d in cursor]
        return [self._from_doc(d) for d in docs]

    async def find_one(self, assignment_id: str) -> Optional[Assignment]:
        d = await self.col.find_one({"assignmentId": str(assignment_id)})
        return self._from_doc(d) if d else None

    async def find_many(self, assignment_ids: Iterable[str]) -> Sequence[Assignment]:
        ids = list({str(i) for i in assignment_ids})
        if not ids:
            return []
        docs = await self.col.find({"assignmentId": {"$in": ids}}).to_list(length=None)
        return [self._from_doc(d) for d in docs]

    async def update(
        self,
        assignment_id: str,
        fields: dict[str, Any],
        new_attachments: List[Attachment],
    ) -> Optional[Assignment]:
        # $set e $push nello stesso update: nessuno stato intermedio visibile
        ops: dict[str, Any] = {"$set": fields}
        if new_attachments:
            ops["$push"] = {"attachments": {"$each": [a.model_dump() for a in new_attachments]}}
        d = await self.col.find_one_and_update(
            {"assignmentId": str(assignment_id)},
            ops,
            return_document=ReturnDocument.AFTER,
        )
        return self._from_doc(d) if d else None

    async def delete(self, assignment_id: str) -> bool:
        res = await self.col.delete_one({"assignmentId": str(assignment_id)})
        return res.deleted_count > 0

    async def ensure_indexes(self):
        await self.col.create_index("assignmentId", unique=True)
        await self.col.create_index([("createdBy", 1), ("createdAt", -1)])
        await self.col.create_index([("visibility.kind", 1), ("visibility.students", 1)])
