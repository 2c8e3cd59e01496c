# src/orplan/dataloader/schedule_reader.py
from __future__ import annotations

import logging
from pathlib import Path

from orplan.dataloader.row_parser import normalize_content
from orplan.errors import DataError

logger = logging.getLogger(__name__)


class ScheduleReader:
    """
    OP-plan file → normalized text.

    Rules:
      - Encoding: UTF-8 (BOM tolerated); on decode failure retry as cp1252,
        the usual encoding of exports from Windows hospital systems
      - Line endings normalized to LF, leading BOM stripped
      - Content checks are NOT done here; the importer reports them as issues

    Fatal errors (raise DataError):
      - path is not a pathlib.Path
      - file missing or not a regular file
      - OS error while reading
    """

    ENCODINGS = ("utf-8-sig", "cp1252")

    def read(self, path: Path) -> str:
        self._check_path(path)
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise DataError(
                message=f"Unable to read OP-plan file: {e}",
                source="ScheduleReader.read",
                suggested_action="Check file permissions and that the file is not locked.",
            ) from e

        text, encoding = self._decode(raw)
        logger.info("ScheduleReader: %d byte(s) read from %s (%s)", len(raw), path, encoding)
        return normalize_content(text)

    def _check_path(self, path: Path) -> None:
        if not isinstance(path, Path):
            raise DataError(
                message=f"Invalid path type: expected pathlib.Path, got {type(path).__name__}",
                source="ScheduleReader._check_path",
                suggested_action="Pass a pathlib.Path pointing to the OP-plan CSV.",
            )
        if not path.is_file():
            raise DataError(
                message=f"OP-plan file not found: {path}",
                source="ScheduleReader._check_path",
                suggested_action="Verify the --input path.",
            )

    def _decode(self, raw: bytes) -> tuple[str, str]:
        for encoding in self.ENCODINGS[:-1]:
            try:
                return raw.decode(encoding), encoding
            except UnicodeDecodeError:
                logger.debug("ScheduleReader: not %s, trying next encoding", encoding)
        # cp1252 maps nearly every byte; undefined bytes are replaced
        fallback = self.ENCODINGS[-1]
        return raw.decode(fallback, errors="replace"), fallback


__all__ = ["ScheduleReader"]
