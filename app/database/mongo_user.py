from typing import Iterable, List, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database.user_repo import UserRepo
from app.schemas.user import StudentProfile


class MongoUserRepository(UserRepo):
    """Legge la collection 'users' gestita dal servizio di identita' (sola lettura)."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db["users"]

    def _from_doc(self, d: dict) -> StudentProfile:
        return StudentProfile(
            userId=str(d.get("userId") or d["_id"]),
            name=d.get("name", ""),
            email=d.get("email", ""),
            studentId=d.get("studentId"),
        )

    async def find_students(self) -> Sequence[StudentProfile]:
        projection = {"userId": 1, "name": 1, "email": 1, "studentId": 1}
        cursor = self.col.find({"role": "student"}, projection).sort("name", 1)
        docs: List[dict] = [d async for d in cursor]
        return [self._from_doc(d) for d in docs]

    async def find_many(self, user_ids: Iterable[str]) -> Sequence[StudentProfile]:
        ids = list({str(i) for i in user_ids})
        if not ids:
            return []
        projection = {"userId": 1, "name": 1, "email": 1, "studentId": 1}
        docs = await self.col.find({"userId": {"$in": ids}}, projection).to_list(length=None)
        return [self._from_doc(d) for d in docs]
