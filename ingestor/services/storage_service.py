# storage_service.py
import asyncio
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional, Union

from ingestor.core.errors import ErrorKind


@dataclass(frozen=True)
class StoreResult:
    ok: bool
    path: Optional[Path] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def success(cls, path: Path) -> "StoreResult":
        return cls(ok=True, path=path)

    @classmethod
    def failure(cls, kind: ErrorKind = ErrorKind.STORAGE) -> "StoreResult":
        return cls(ok=False, error=kind)


def timestamp_file_name(now: datetime) -> str:
    """data-DD-MM-YY_HH-mm-ss-mmm.json, no ':' or '/' so it is safe on every filesystem."""
    millis = now.microsecond // 1000
    return f"data-{now.strftime('%d-%m-%y_%H-%M-%S')}-{millis:03d}.json"


def is_plain_file_name(name: str) -> bool:
    """True for a bare name that stays inside the target directory."""
    if name in (".", ".."):
        return False
    return not any(ch in name for ch in ("/", "\\", "\x00"))


def override_file_name(payload: Any) -> Optional[str]:
    """
    Caller supplied name from fileData.fileName, if it is a usable string.
    Absolute paths and names with separators are ignored, so the timestamp
    name is used instead.
    """
    if not isinstance(payload, dict):
        return None
    file_data = payload.get("fileData")
    if not isinstance(file_data, dict):
        return None
    name = file_data.get("fileName")
    if not isinstance(name, str) or not name.strip():
        return None
    name = name.strip()
    if not is_plain_file_name(name):
        return None
    return name


class PayloadStore:
    """
    Writes accepted payloads as pretty-printed JSON files.
    Filesystem calls run in worker threads so the event loop keeps serving
    other requests while a slow disk is busy.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock

    def build_file_name(self, payload: Any) -> str:
        return override_file_name(payload) or timestamp_file_name(self.clock())

    async def persist(self, payload: Any, directory: Union[str, Path]) -> StoreResult:
        folder = Path(directory)
        try:
            await asyncio.to_thread(folder.mkdir, parents=True, exist_ok=True)

            file_path = folder / self.build_file_name(payload)
            content = json.dumps(payload, indent=2, ensure_ascii=False)
            await asyncio.to_thread(file_path.write_text, content, encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            self.logger.error(f'[SAVE ERROR] Check folder "{directory}" or permissions.')
            self.logger.error(f"[SAVE ERROR] {e}")
            return StoreResult.failure(ErrorKind.STORAGE)

        return StoreResult.success(file_path)
