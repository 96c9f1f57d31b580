import logging
from abc import ABC, abstractmethod

logger = logging.getLogger("classroom.attachments")


class AttachmentStore(ABC):
    @abstractmethod
    async def release(self, storage_id: str) -> None:
        """Rilascia il blob identificato da storage_id. Solleva un'eccezione se fallisce."""
        raise NotImplementedError


class LoggingAttachmentStore(AttachmentStore):
    """
    Store di default quando nessun backend dei blob e' configurato:
    la richiesta di rilascio viene solo registrata nel log, il blob resta dov'e'.
    """

    async def release(self, storage_id: str) -> None:
        logger.warning("Nessun backend blob configurato: release di %s solo registrato, blob non liberato", storage_id)
