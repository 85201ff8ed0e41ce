"""
Local persistence for the semester record.

The data file is a small JSON key-value store. The record lives under a
single fixed key; a missing or damaged entry reads back as an empty record.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .config import DATA_FILE, STORAGE_KEY
from .models import Semester

logger = logging.getLogger(__name__)


class RecordStore:
    """Loads the record once and rewrites it after every change."""

    def __init__(self, data_file: Optional[Path] = None, key: str = STORAGE_KEY):
        self.data_file = Path(data_file) if data_file is not None else DATA_FILE
        self.key = key

    def _read_store(self) -> Dict[str, Any]:
        if not self.data_file.exists():
            return {}
        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s, treating it as empty: %s", self.data_file, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: top level is not an object", self.data_file)
            return {}
        return data

    def _write_store(self, data: Dict[str, Any]) -> bool:
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.data_file.parent), prefix=self.data_file.name, suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                os.replace(tmp_path, self.data_file)
            except OSError:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            logger.error("Saving record to %s failed: %s", self.data_file, e)
            return False
        return True

    def load(self) -> List[Semester]:
        blob = self._read_store().get(self.key)
        if blob is None:
            logger.info("No saved record under %r in %s", self.key, self.data_file)
            return []

        try:
            if isinstance(blob, str):
                blob = json.loads(blob)
            if not isinstance(blob, list):
                raise ValueError("record must be a list of semesters")
            semesters = [Semester.from_dict(item) for item in blob]
        except (TypeError, ValueError) as e:
            logger.warning("Saved record under %r is malformed, starting empty: %s", self.key, e)
            return []

        logger.info("Loaded %d semester(s) from %s", len(semesters), self.data_file)
        return semesters

    def save(self, semesters: Sequence[Semester]) -> bool:
        data = self._read_store()
        if semesters:
            data[self.key] = [s.to_dict() for s in semesters]
        else:
            data.pop(self.key, None)
        saved = self._write_store(data)
        if saved:
            logger.debug("Saved %d semester(s) to %s", len(semesters), self.data_file)
        return saved

    def clear(self) -> bool:
        return self.save([])
