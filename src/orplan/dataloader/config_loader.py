# src/orplan/dataloader/config_loader.py
from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from orplan.errors import ConfigError
from orplan.schemas.models import ImportConfig


class ConfigLoader:
    """
    @brief
    Reads config.yaml into a validated ImportConfig.

    @details
    Every failure mode (bad path, wrong extension, unreadable file, YAML
    syntax, empty or non-mapping document, schema violation) surfaces as a
    `ConfigError` carrying a suggested action for the operator.
    """

    SUFFIXES = frozenset({".yaml", ".yml"})

    def load(self, path: Path) -> ImportConfig:
        """
        @brief
        Load and validate the import configuration.

        @params
            path : Path
                Location of config.yaml.

        @returns
            ImportConfig with defaults applied for omitted keys.

        @raises
            ConfigError
                On any I/O, syntax or schema problem.
        """
        # (1) Path sanity
        self._check_path(path)

        # (2) YAML → mapping
        data = self._parse(path)

        # (3) Mapping → ImportConfig
        return self.from_mapping(data)

    def load_or_default(self, path: Path | None) -> ImportConfig:
        """Defaults when no path is given; a given path must load cleanly."""
        if path is None:
            return ImportConfig()
        return self.load(path)

    def from_mapping(self, data: Mapping[str, Any]) -> ImportConfig:
        """
        @brief
        Validate an already parsed mapping.

        @details
        Pydantic errors are wrapped so callers only handle ConfigError.
        """
        try:
            return ImportConfig.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigError(
                message=f"Invalid import configuration: {e}",
                source="ConfigLoader.from_mapping",
                suggested_action=(
                    "Check keys, types and bounds in config.yaml; "
                    "unknown keys are rejected."
                ),
            ) from e

    # ------------------------------
    # Internal helpers
    # ------------------------------
    def _check_path(self, path: Path) -> None:
        if not isinstance(path, Path):
            raise ConfigError(
                message=f"Expected pathlib.Path, got {type(path).__name__}",
                source="ConfigLoader._check_path",
                suggested_action="Pass a pathlib.Path pointing to config.yaml.",
            )
        if not path.exists():
            raise ConfigError(
                message=f"Configuration file not found: {path}",
                source="ConfigLoader._check_path",
                suggested_action="Create config.yaml or pass --config with a valid path.",
            )
        if path.suffix.lower() not in self.SUFFIXES:
            raise ConfigError(
                message=f"Unsupported configuration extension: {path.suffix or '<none>'}",
                source="ConfigLoader._check_path",
                suggested_action="Rename the file to .yaml or .yml.",
            )

    def _parse(self, path: Path) -> dict[str, Any]:
        try:
            text = path.read_text(encoding="utf-8")
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(
                message=f"YAML syntax error: {e}",
                source="ConfigLoader._parse",
                suggested_action="Fix indentation and quoting in config.yaml.",
            ) from e
        except OSError as e:
            raise ConfigError(
                message=f"Cannot read configuration file: {e}",
                source="ConfigLoader._parse",
                suggested_action="Check file permissions.",
            ) from e

        if data is None:
            raise ConfigError(
                message="Configuration file is empty.",
                source="ConfigLoader._parse",
                suggested_action="Add at least one key or remove --config to use defaults.",
            )
        if not isinstance(data, Mapping):
            raise ConfigError(
                message="Configuration root must be a mapping.",
                source="ConfigLoader._parse",
                suggested_action="Use top-level `key: value` pairs.",
            )
        return dict(data)


__all__ = ["ConfigLoader"]
