"""Webhook ingest service.

ONLY ingestion - validates a payload and hands it to the file store.
"""

import logging
from typing import Optional

from ..core.exceptions import HokkuError
from ..models.payload import WebhookPayload
from ..models.policy import ValidationPolicy
from ..models.results import PersistenceResult
from ..storage.file_store import FileStore
from ..utils.timezone import Timer
from ..validation.payload_validator import PayloadValidator

logger = logging.getLogger(__name__)


class IngestService:
    """Validate-then-persist pipeline for incoming webhooks."""

    def __init__(
        self,
        policy: ValidationPolicy,
        validator: Optional[PayloadValidator] = None,
        store: Optional[FileStore] = None,
    ):
        self._policy = policy
        self._validator = validator or PayloadValidator(policy)
        self._store = store or FileStore(policy)

    @property
    def store(self) -> FileStore:
        return self._store

    def check_capacity(self) -> int:
        """Advisory free-space preflight; raises InsufficientSpaceError."""
        return self._store.check_capacity()

    def ingest(self, payload: WebhookPayload) -> PersistenceResult:
        """Validate and persist a payload.

        Raises:
            PayloadValidationError: when the payload is rejected
            StorageError: when it cannot be written
        """
        timer = Timer()
        try:
            self._validator.validate(payload)
            result = self._store.persist(payload)
        except HokkuError as e:
            logger.warning(
                f"Webhook ingest failed after {timer.elapsed_ms()}ms: "
                f"{e.error_code} {e.message} payload={payload}"
            )
            raise

        logger.info(
            f"Webhook ingested in {timer.elapsed_ms()}ms: "
            f"id={result.identifier} file={result.filename} size={result.size}"
        )
        return result


def create_ingest_service(policy: ValidationPolicy) -> IngestService:
    """Create ingest service."""
    return IngestService(policy)
