# src/orplan/conflicts/detector.py
from __future__ import annotations

import heapq
import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence

from orplan.schemas.catalog import ConflictSeverity
from orplan.schemas.models import (
    CanonicalOperation,
    ConflictEntry,
    ImportConfig,
    minutes_to_hhmm,
)

logger = logging.getLogger(__name__)


# ----------------------------
# AUXILIARY STRUCTURES / FUNCTIONS
# ----------------------------
def _window(start: int, end: int) -> str:
    return f"{minutes_to_hhmm(start)}-{minutes_to_hhmm(end)}"


def classify_overlap(
    minutes: int, low_max: int = 15, medium_max: int = 30
) -> ConflictSeverity:
    """Severity of an overlap: ≤ low_max → low, ≤ medium_max → medium, else high."""
    if minutes <= low_max:
        return "low"
    if minutes <= medium_max:
        return "medium"
    return "high"


def _group_by_room_and_date(
    operations: Iterable[CanonicalOperation],
) -> dict[tuple[str, str], list[CanonicalOperation]]:
    groups: dict[tuple[str, str], list[CanonicalOperation]] = defaultdict(list)
    for op in operations:
        groups[(op.room, op.date)].append(op)
    return groups


# ---------------------------
# DETECTOR
# ----------------------------
def _duplicates(room: str, date: str, ops: Sequence[CanonicalOperation]) -> list[ConflictEntry]:
    """One exact-duplicate entry per start minute shared by two or more operations."""
    by_start: dict[int, list[CanonicalOperation]] = defaultdict(list)
    for op in ops:
        by_start[op.start_minutes].append(op)

    found: list[ConflictEntry] = []
    for start in sorted(by_start):
        same = by_start[start]
        if len(same) < 2:
            continue
        found.append(
            ConflictEntry(
                room=room,  # type: ignore[arg-type]
                date=date,
                time_window=_window(start, max(op.end_minutes for op in same)),
                operations=tuple(same),
                kind="exact-duplicate",
                severity="high",
                overlap_minutes=min(op.duration_minutes for op in same),
            )
        )
    return found


def _overlaps(
    room: str, date: str, ops: Sequence[CanonicalOperation], cfg: ImportConfig
) -> list[ConflictEntry]:
    """
    @brief
    Sweep one sorted room/date group and report every overlapping pair.

    @details
    The active set holds the earlier operations still running at the
    current start, as a heap keyed by end minute. An operation conflicts
    with every active operation; pairs sharing a start minute are left to
    the duplicate check. The overlap length is the intersection
    `min(earlier_end, op_end) - op_start`.
    """
    found: list[ConflictEntry] = []
    active: list[tuple[int, int, CanonicalOperation]] = []

    for seq, op in enumerate(ops):
        # (1) Drop operations that ended at or before this start
        while active and active[0][0] <= op.start_minutes:
            heapq.heappop(active)

        # (2) Pair with each running operation, earliest first
        running = sorted(active, key=lambda item: item[1])
        for _, _, earlier in running:
            if earlier.start_minutes == op.start_minutes:
                continue
            overlap_end = min(earlier.end_minutes, op.end_minutes)
            minutes = overlap_end - op.start_minutes
            found.append(
                ConflictEntry(
                    room=room,  # type: ignore[arg-type]
                    date=date,
                    time_window=_window(op.start_minutes, overlap_end),
                    operations=(earlier, op),
                    kind="overlap",
                    severity=classify_overlap(
                        minutes,
                        cfg.overlap_low_max_minutes,
                        cfg.overlap_medium_max_minutes,
                    ),
                    overlap_minutes=minutes,
                )
            )

        heapq.heappush(active, (op.end_minutes, seq, op))

    return found


def detect_conflicts(
    operations: Iterable[CanonicalOperation], config: ImportConfig | None = None
) -> list[ConflictEntry]:
    """
    @brief
    Find overlaps and double bookings per operating room and date.

    @details
    Pure function: the input is not modified and repeated calls return equal
    results. Groups are processed in (date, room) order; inside a group
    operations are sorted by (start, id), so the output does not depend on
    the input order. Conflicts annotate the schedule and never remove
    operations.

    @params
        operations : Iterable[CanonicalOperation]
            Validated operations of one import.
        config : ImportConfig | None
            Source of the severity thresholds (defaults when None).

    @returns
        Conflict entries ordered by date, room, window start.
    """
    cfg = config or ImportConfig()
    conflicts: list[ConflictEntry] = []

    # (1) Group by room and date
    groups = _group_by_room_and_date(operations)

    # (2) Sweep each group chronologically
    for room, date in sorted(groups, key=lambda key: (key[1], key[0])):
        ops = sorted(groups[(room, date)], key=lambda op: (op.start_minutes, op.id))
        found = _duplicates(room, date, ops) + _overlaps(room, date, ops, cfg)
        found.sort(key=lambda c: (c.time_window, c.kind, c.operation_ids))
        conflicts.extend(found)

    if conflicts:
        logger.info(
            "Conflicts: %d (%d overlap, %d duplicate)",
            len(conflicts),
            sum(1 for c in conflicts if c.kind == "overlap"),
            sum(1 for c in conflicts if c.kind == "exact-duplicate"),
        )
    return conflicts


__all__ = ["detect_conflicts", "classify_overlap"]
