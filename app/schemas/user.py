from typing import Optional

from pydantic import BaseModel


class StudentProfile(BaseModel):
    userId: str
    name: str
    email: str
    studentId: Optional[str] = None
