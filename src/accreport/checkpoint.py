"""Restart checkpoint stores.

The report writer only needs a tiny key/value contract: it reads one flag when
it opens and sets it once the header is on disk. Values are strings so the
same store can sit behind a batch framework's execution context.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol

from .utils import write_json

logger = logging.getLogger(__name__)


class CheckpointStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def put(self, key: str, value: str) -> None:
        ...


class MemoryCheckpoint:
    """In-process store; the caller decides how (and whether) to persist it."""

    def __init__(self, values: Optional[Dict[str, str]] = None) -> None:
        self.values: Dict[str, str] = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def put(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonCheckpoint:
    """Store persisted as a JSON object; every put rewrites the file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.values: Dict[str, str] = {}
        if self.path.exists():
            data = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError(f"Checkpoint {self.path} does not contain a JSON object")
            self.values = {str(k): str(v) for k, v in data.items()}
            logger.info("Loaded checkpoint %s (%d keys)", self.path, len(self.values))

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def put(self, key: str, value: str) -> None:
        self.values[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # readers never see a half-written checkpoint
        tmp = self.path.with_name(self.path.name + ".tmp")
        write_json(tmp, self.values)
        tmp.replace(self.path)
