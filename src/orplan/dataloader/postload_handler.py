# src/orplan/dataloader/postload_handler.py
from __future__ import annotations

import json
import logging
from pathlib import Path

from orplan.schemas.models import CanonicalOperation, ImportResult

logger = logging.getLogger(__name__)


class ImportResultHandler:
    """
    @brief
    Post-import step: hand operations downstream and persist row issues.

    @details
    Operations are always returned, even when some rows failed; the row
    issues (errors first, then warnings) go to `import_issues.json` in the
    output directory so the planner can correct the source file. A failed
    structural validation returns None: nothing downstream may run.
    """

    ISSUES_FILE = "import_issues.json"

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir

    def handle(self, result: ImportResult) -> list[CanonicalOperation] | None:
        # (1) Clean import → pass operations on
        if result.success:
            logger.info(
                "PostImport: %d operation(s) ready, %d warning(s).",
                len(result.operations),
                len(result.warnings),
            )
            return result.operations

        # (2) Issues present → write report next to the other artifacts
        self.output_dir.mkdir(parents=True, exist_ok=True)
        out_path = self.output_dir / self.ISSUES_FILE
        issues = [i.model_dump(mode="json") for i in [*result.errors, *result.warnings]]
        try:
            with out_path.open("w", encoding="utf-8") as f:
                json.dump(issues, f, ensure_ascii=False, indent=2)
            logger.error(
                "PostImport: %d error(s) in import. See %s", len(result.errors), out_path
            )
        except OSError as e:
            logger.error("PostImport: failed to write issue report: %s", e)

        # (3) Structural failure blocks downstream processing
        if result.phase == "structural-error":
            return None
        return result.operations


__all__ = ["ImportResultHandler"]
