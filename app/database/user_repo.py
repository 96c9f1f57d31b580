from abc import ABC, abstractmethod
from typing import Iterable, Sequence

from app.schemas.user import StudentProfile


class UserRepo(ABC):
    @abstractmethod
    async def find_students(self) -> Sequence[StudentProfile]:
        """Tutti gli utenti con ruolo 'student'."""
        raise NotImplementedError

    @abstractmethod
    async def find_many(self, user_ids: Iterable[str]) -> Sequence[StudentProfile]:
        """Profili degli utenti richiesti che esistono; gli ID sconosciuti vengono ignorati."""
        raise NotImplementedError
