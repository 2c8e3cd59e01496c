# src/orplan/importer.py
"""
@brief
Import orchestrator: raw OP-plan text → ImportResult.

@details
One `ScheduleImporter` instance owns one import call. Phases:

    idle → structural-validation → row-processing → conflict-detection
         → summary → success

`structural-error` ends the import right after structural validation with
only errors populated. `cancelled` is entered when the caller's
`should_cancel` callback returns True at the checkpoint between row
processing and conflict detection; the import then raises
`ImportCancelledError` and no partial result is returned.

`success` of the result is True iff no row-level error occurred; warnings
and conflicts never affect it. The terminal phase `success` only states
that every phase ran to completion.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor

from orplan.conflicts.detector import detect_conflicts
from orplan.dataloader.row_parser import parse_line, split_line, split_lines
from orplan.dataloader.types import RowOutcome
from orplan.errors import ImportCancelledError
from orplan.metrics.summary import build_summary
from orplan.schemas.models import (
    CanonicalOperation,
    ImportConfig,
    ImportPhase,
    ImportResult,
    ValidationIssue,
)
from orplan.transform.transformer import Transformer
from orplan.validator.structure import validate_structure

logger = logging.getLogger(__name__)

CancelCheck = Callable[[], bool]


class ScheduleImporter:
    """
    @brief
    Per-call import context.

    @details
    Holds the configuration, the cancellation callback and the current
    phase. Nothing is shared between instances, so concurrent imports on
    separate instances are independent.
    """

    def __init__(
        self, config: ImportConfig | None = None, *, should_cancel: CancelCheck | None = None
    ) -> None:
        self.config = config or ImportConfig()
        self.should_cancel = should_cancel
        self.phase: ImportPhase = "idle"
        self._transformer = Transformer(self.config)

    # ------------------------------
    # Public API
    # ------------------------------
    def run(self, content: str) -> ImportResult:
        """
        @brief
        Execute all import phases on the given file content.

        @params
            content : str
                Full text of the semicolon-delimited export.

        @returns
            ImportResult with operations, issues, conflicts and summary.

        @raises
            ImportCancelledError
                When `should_cancel()` returns True at the checkpoint.
        """
        cfg = self.config

        # (1) Structural validation (fatal on any issue)
        self.phase = "structural-validation"
        lines = split_lines(content)
        structural = validate_structure(
            lines,
            delimiter=cfg.delimiter,
            min_columns=cfg.min_columns,
            required_columns=cfg.required_columns,
        )
        if structural:
            self.phase = "structural-error"
            return ImportResult(success=False, phase=self.phase, errors=structural)

        # (2) Row processing
        self.phase = "row-processing"
        header_pos = next(i for i, ln in enumerate(lines) if ln.strip())
        headers = split_line(lines[header_pos], cfg.delimiter)
        present = frozenset(headers)

        rows: list[tuple[int, str]] = []
        skipped = 0
        for pos in range(header_pos + 1, len(lines)):
            if not lines[pos].strip():
                skipped += 1
                continue
            rows.append((pos + 1, lines[pos]))

        outcomes = self._transform_rows(rows, headers, present)

        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []
        kept: list[CanonicalOperation] = []
        for outcome in outcomes:
            errors.extend(outcome.errors)
            warnings.extend(outcome.warnings)
            if outcome.operation is not None and not outcome.errors:
                kept.append(outcome.operation)
        operations = _unique_ids(kept)

        # (3) Cancellation checkpoint
        if self.should_cancel is not None and self.should_cancel():
            self.phase = "cancelled"
            logger.warning("Import cancelled after row processing (%d row(s))", len(rows))
            raise ImportCancelledError(
                "Import cancelled by caller",
                source="ScheduleImporter.run",
                suggested_action="Start a new import when ready.",
            )

        # (4) Conflict detection
        self.phase = "conflict-detection"
        conflicts = detect_conflicts(operations, cfg)

        # (5) Summary
        self.phase = "summary"
        failed = sum(1 for outcome in outcomes if outcome.errors)
        summary = build_summary(
            operations,
            total_rows=len(rows),
            failed_transforms=failed,
            skipped_rows=skipped,
            conflict_count=len(conflicts),
        )

        self.phase = "success"
        result = ImportResult(
            success=not errors,
            phase=self.phase,
            operations=operations,
            errors=errors,
            warnings=warnings,
            conflicts=conflicts,
            summary=summary,
        )
        self._report_summary(result)
        return result

    # ------------------------------
    # Internal helpers
    # ------------------------------
    def _transform_one(
        self, row: tuple[int, str], headers: Sequence[str], present: frozenset[str]
    ) -> RowOutcome:
        row_index, line = row
        raw = parse_line(line, headers, self.config.delimiter)
        return self._transformer.transform(raw, row_index, present)

    def _transform_rows(
        self, rows: list[tuple[int, str]], headers: Sequence[str], present: frozenset[str]
    ) -> list[RowOutcome]:
        """Transform rows in file order; uses a thread pool when workers > 1."""
        if self.config.workers <= 1 or len(rows) < 2:
            return [self._transform_one(row, headers, present) for row in rows]

        with ThreadPoolExecutor(max_workers=self.config.workers) as pool:
            # Executor.map yields results in submission order
            return list(pool.map(lambda row: self._transform_one(row, headers, present), rows))

    def _report_summary(self, result: ImportResult) -> None:
        s = result.summary
        if result.success:
            logger.info(
                "Import OK: kept=%d/%d, warnings=%d, conflicts=%d",
                s.successful_transforms,
                s.total_rows,
                len(result.warnings),
                s.conflict_count,
            )
            return

        counts = Counter(issue.code for issue in result.errors)
        summary = ", ".join(f"{k}={v}" for k, v in counts.items())
        logger.error(
            "Import failed: %d issue(s) across %d row(s), kept=%d [%s]",
            len(result.errors),
            s.total_rows,
            s.successful_transforms,
            summary or "no-summary",
        )


def _unique_ids(operations: list[CanonicalOperation]) -> list[CanonicalOperation]:
    """Suffix repeated ids with -2, -3, ... in row order; first occurrence keeps the bare id."""
    seen: Counter[str] = Counter()
    unique: list[CanonicalOperation] = []
    for op in operations:
        seen[op.id] += 1
        if seen[op.id] == 1:
            unique.append(op)
        else:
            unique.append(op.model_copy(update={"id": f"{op.id}-{seen[op.id]}"}))
    return unique


def import_schedule(
    content: str,
    config: ImportConfig | None = None,
    *,
    should_cancel: CancelCheck | None = None,
) -> ImportResult:
    """
    @brief
    Facade: run one import on a fresh ScheduleImporter.

    @details
    Equivalent to `ScheduleImporter(config, should_cancel=...).run(content)`.
    Raises ImportCancelledError on cancellation; never raises for bad input.
    """
    return ScheduleImporter(config, should_cancel=should_cancel).run(content)


__all__ = ["ScheduleImporter", "import_schedule"]
