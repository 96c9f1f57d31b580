from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Sequence

from app.schemas.submission import Submission


class SubmissionRepo(ABC):
    @abstractmethod
    async def create(self, submission: Submission) -> str:
        """
        Inserisce una submission. Il vincolo unico (assignmentId, studentId)
        e' dello storage: un secondo insert per la stessa coppia solleva DuplicateError.
        """
        raise NotImplementedError

    @abstractmethod
    async def find_one(self, submission_id: str) -> Optional[Submission]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_pair(self, assignment_id: str, student_id: str) -> Optional[Submission]:
        raise NotImplementedError

    @abstractmethod
    async def find_for_assignment(self, assignment_id: str) -> Sequence[Submission]:
        """Submission di un assignment, consegnate piu' di recente prima."""
        raise NotImplementedError

    @abstractmethod
    async def find_for_student(self, student_id: str) -> Sequence[Submission]:
        """Submission di uno studente, consegnate piu' di recente prima."""
        raise NotImplementedError

    @abstractmethod
    async def update_grade(
        self,
        submission_id: str,
        grade: float,
        feedback: Optional[str],
        status: str,
        ts: datetime,
    ) -> Optional[Submission]:
        """Scrive voto/feedback/stato (last-write-wins). None se la submission non esiste."""
        raise NotImplementedError
