# scripts/gen_schemas.py
"""
Generate JSON Schemas for the public orplan models.

Exported models:
    - ValidationIssue
    - CanonicalOperation
    - ConflictEntry
    - ImportResult
    - ImportConfig

Output directory: schemas/
"""

import json
from pathlib import Path

from orplan.schemas.models import (
    CanonicalOperation,
    ConflictEntry,
    ImportConfig,
    ImportResult,
    ValidationIssue,
)

MODELS = {
    "validation_issue": ValidationIssue,
    "operation": CanonicalOperation,
    "conflict": ConflictEntry,
    "import_result": ImportResult,
    "config": ImportConfig,
}


def export_schema(model_cls, name: str, out_dir: Path) -> Path:
    """
    @brief
    Writes `<name>.schema.json` for one pydantic model.

    @details
    Uses the serialization schema so computed fields (e.g. end_time of an
    operation) are documented as they appear in exported JSON.

    @returns
        Path of the written schema file.
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    schema_path = (out_dir / f"{name}.schema.json").resolve()
    schema = model_cls.model_json_schema(mode="serialization")

    with schema_path.open("w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
        f.write("\n")

    try:
        rel = schema_path.relative_to(Path.cwd())
    except ValueError:
        rel = schema_path
    print(f"Generated {rel}")
    return schema_path


def main(out_dir: Path | None = None) -> list[Path]:
    target = out_dir or Path("schemas").resolve()
    return [export_schema(model, name, target) for name, model in MODELS.items()]


if __name__ == "__main__":
    main()
