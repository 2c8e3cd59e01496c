# scripts/run.py
from __future__ import annotations

import argparse
import logging
import sys
import time
import traceback
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from orplan.dataloader.config_loader import ConfigLoader
from orplan.dataloader.postload_handler import ImportResultHandler
from orplan.dataloader.schedule_reader import ScheduleReader
from orplan.errors import DataError, OrplanError
from orplan.export.schedule_export import write_import_report, write_operations_csv
from orplan.importer import import_schedule


def _setup_logging() -> None:
    """
    @brief
    Initializes global logging configuration.

    @details
    INFO level with a compact `[LEVEL] message` format shared by all
    orplan modules.
    """
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """
    @brief
    Parses command-line arguments of the import runner.

    @details
    - config path (YAML, optional: defaults apply when the file is absent),
    - input OP-plan CSV path,
    - output directory for the generated artifacts.
    """
    parser = argparse.ArgumentParser(
        prog="orplan-import",
        description="Import a German OP-plan export: validate → transform → detect conflicts → report",
    )

    # (1) Config path argument
    parser.add_argument(
        "--config",
        type=str,
        default="config/config.yaml",
        help="Path to config YAML (default: config/config.yaml)",
    )

    # (2) Input CSV path argument
    parser.add_argument(
        "--input",
        type=str,
        default="data/input/op_plan.csv",
        help="Path to the OP-plan CSV (default: data/input/op_plan.csv)",
    )

    # (3) Output directory argument
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory for artifacts (default: output_dir from config)",
    )

    return parser.parse_args(argv)


def run_import(config_path: Path, input_path: Path, output_dir: Path | None = None) -> dict[str, Any]:
    """
    @brief
    Executes one import from file to artifacts.

    @details
    (1) Load configuration (defaults when the config file does not exist).
    (2) Read the OP-plan file and run the import core.
    (3) Post-process: write import_issues.json when rows failed.
    (4) Export operations.csv and import_report.json (unless disabled).

    @returns
        Dictionary with success flag, phase, counters and artifact paths.

    @raises
        OrplanError
            On configuration or file problems, and on a structural import error.
    """
    # (1) Start timer and load configuration
    t0 = time.perf_counter()
    logging.info("Loading config: %s", config_path)
    cfg = ConfigLoader().load_or_default(config_path if config_path.exists() else None)
    out_dir = output_dir or Path(cfg.output_dir or "data/output")

    # (2) Read and import
    logging.info("Reading OP-plan: %s", input_path)
    content = ScheduleReader().read(input_path)
    result = import_schedule(content, cfg)

    # (3) Post-import handling
    operations = ImportResultHandler(output_dir=out_dir).handle(result)
    if operations is None:
        raise DataError(
            message="; ".join(issue.message for issue in result.errors),
            source="scripts.run",
            suggested_action=f"Fix the file header; details in {(out_dir / 'import_issues.json').as_posix()}",
        )

    # (4) Artifacts
    artifacts: dict[str, Path | None] = {"operations_csv": None, "import_report": None}
    if cfg.io_policy.write_artifacts:
        artifacts["operations_csv"] = write_operations_csv(
            operations, out_dir / "operations.csv", delimiter=cfg.delimiter
        )
        artifacts["import_report"] = write_import_report(result, out_dir)

    issues_path = out_dir / ImportResultHandler.ISSUES_FILE
    artifacts["import_issues"] = issues_path if not result.success else None

    logging.info("Import finished in %.2f s", time.perf_counter() - t0)
    return {
        "success": result.success,
        "phase": result.phase,
        "operations": len(result.operations),
        "errors": len(result.errors),
        "warnings": len(result.warnings),
        "conflicts": len(result.conflicts),
        "artifacts": artifacts,
    }


def main(argv: Sequence[str] | None = None) -> int:
    """
    @brief
    CLI entry point.

    @details
    Exit codes:
      0 – all rows imported without errors
      1 – row errors, structural error or controlled failure (config/data)
      2 – unexpected crash
    """
    _setup_logging()
    args = _parse_args(argv)

    try:
        summary = run_import(
            Path(args.config),
            Path(args.input),
            Path(args.output) if args.output else None,
        )
        arts = summary["artifacts"]
        logging.info(
            "Imported %d operation(s), %d error(s), %d warning(s), %d conflict(s). Artifacts: %s",
            summary["operations"],
            summary["errors"],
            summary["warnings"],
            summary["conflicts"],
            ", ".join(Path(p).name for p in arts.values() if p) or "none",
        )
        return 0 if summary["success"] else 1

    except OrplanError as e:
        logging.error(str(e))
        return 1
    except Exception:
        logging.error("Unexpected error occurred:")
        traceback.print_exc()
        return 2


if __name__ == "__main__":
    sys.exit(main())
