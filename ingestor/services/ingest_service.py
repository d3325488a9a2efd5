# ingest_service.py
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from ingestor.core.config import Settings
from ingestor.core.errors import ErrorKind
from ingestor.services.prometheus_metrics import metrics
from ingestor.services.storage_service import PayloadStore
from ingestor.services.validation_service import validate_payload


@dataclass(frozen=True)
class IngestResult:
    ok: bool
    path: Optional[Path] = None
    error: Optional[ErrorKind] = None


class IngestService:
    """Validate-then-persist pipeline behind POST /process."""

    def __init__(
        self,
        settings: Settings,
        store: Optional[PayloadStore] = None,
        logger: Optional[logging.Logger] = None,
        validator: Callable[[Any], bool] = validate_payload,
    ):
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)
        self.store = store or PayloadStore(logger=self.logger)
        self.validator = validator

    async def process(self, payload: Any) -> IngestResult:
        if not self.validator(payload):
            self.logger.error("[PROCESS ERROR] Data is not in the correct format")
            metrics.track_payload("invalid")
            return IngestResult(ok=False, error=ErrorKind.VALIDATION)

        stored = await self.store.persist(payload, self.settings.DATA_LOCATION)
        if not stored.ok:
            self.logger.error("[PROCESS ERROR] Failed to save data")
            metrics.track_payload("storage_error")
            return IngestResult(ok=False, error=stored.error or ErrorKind.STORAGE)

        self.logger.info("Completed request and saved to file")
        metrics.track_payload("stored")
        return IngestResult(ok=True, path=stored.path)
