from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Sequence

from app.schemas.assignment import Assignment, Attachment


class AssignmentRepo(ABC):
    @abstractmethod
    async def create(self, assignment: Assignment) -> str:
        """Inserisce un assignment (id gia' generato dal service) e ritorna l'ID."""
        raise NotImplementedError

    @abstractmethod
    async def find_for_teacher(self, teacher_id: str) -> Sequence[Assignment]:
        """Assignment creati dal teacher, piu' recenti prima."""
        raise NotImplementedError

    @abstractmethod
    async def find_for_student(self, student_id: str) -> Sequence[Assignment]:
        """Assignment visibili allo studente ('all' oppure 'individual' che lo include), piu' recenti prima."""
        raise NotImplementedError

    @abstractmethod
    async def find_one(self, assignment_id: str) -> Optional[Assignment]:
        """Ritorna un assignment per ID, oppure None se non esiste."""
        raise NotImplementedError

    @abstractmethod
    async def find_many(self, assignment_ids: Iterable[str]) -> Sequence[Assignment]:
        """Ritorna gli assignment esistenti tra gli ID richiesti."""
        raise NotImplementedError

    @abstractmethod
    async def update(
        self,
        assignment_id: str,
        fields: dict[str, Any],
        new_attachments: List[Attachment],
    ) -> Optional[Assignment]:
        """
        Aggiorna in modo atomico i campi indicati e accoda gli allegati nuovi.
        Ritorna il documento aggiornato, oppure None se non esiste.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, assignment_id: str) -> bool:
        """Cancella un assignment. Ritorna True se qualcosa è stato cancellato."""
        raise NotImplementedError
