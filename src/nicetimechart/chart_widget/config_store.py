"""
Chart config persistence (platformdirs + JSON).

Behavior:
- If the config file is missing or unreadable -> defaults are used
- If schema_version mismatches -> defaults are used (or, optionally, the
  loaded chart config is kept and the version bumped)
- Unknown keys are ignored with warnings (see ChartConfig.from_dict)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from platformdirs import user_config_dir

from nicetimechart.chart_widget.config import ChartConfig
from nicetimechart.core.errors import ChartConfigError
from nicetimechart.utils.logging import get_logger

logger = get_logger(__name__)

# Increment on breaking changes to the on-disk JSON schema.
SCHEMA_VERSION: int = 1


class ChartConfigStore:
    """Loads and saves a ChartConfig to a JSON file."""

    def __init__(self, *, path: Path, config: Optional[ChartConfig] = None) -> None:
        self.path = path
        self.config = config if config is not None else ChartConfig()

    @staticmethod
    def default_config_path(
        app_name: str = "nicetimechart",
        filename: str = "chart_config.json",
        app_author: str | None = None,
    ) -> Path:
        """
        OS-appropriate per-user config path.

        macOS:   ~/Library/Application Support/nicetimechart/chart_config.json
        Linux:   ~/.config/nicetimechart/chart_config.json
        Windows: %APPDATA%\\nicetimechart\\chart_config.json
        """
        return Path(user_config_dir(app_name, app_author)) / filename

    @classmethod
    def load(
        cls,
        *,
        config_path: Optional[Path] = None,
        app_name: str = "nicetimechart",
        filename: str = "chart_config.json",
        default: Optional[ChartConfig] = None,
        schema_version: int = SCHEMA_VERSION,
        reset_on_version_mismatch: bool = True,
    ) -> "ChartConfigStore":
        """Load config from disk, falling back to ``default`` on any problem."""
        path = config_path or cls.default_config_path(app_name=app_name, filename=filename)
        fallback = default if default is not None else ChartConfig()

        try:
            parsed = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.debug("Chart config file not found at %s, using defaults", path)
            return cls(path=path, config=fallback)
        except json.JSONDecodeError as e:
            logger.warning("Chart config file at %s is not valid JSON: %s, using defaults", path, e)
            return cls(path=path, config=fallback)
        except OSError as e:
            logger.warning("Error reading chart config from %s: %s, using defaults", path, e)
            return cls(path=path, config=fallback)

        if not isinstance(parsed, dict):
            logger.warning("Chart config file at %s does not contain a dict, using defaults", path)
            return cls(path=path, config=fallback)

        loaded_version = parsed.get("schema_version", -1)
        if loaded_version != schema_version and reset_on_version_mismatch:
            logger.warning(
                "Chart config schema version mismatch: loaded=%s, expected=%s, using defaults",
                loaded_version,
                schema_version,
            )
            return cls(path=path, config=fallback)

        chart_raw = parsed.get("chart", {})
        if not isinstance(chart_raw, dict):
            logger.warning("Chart config 'chart' entry is not a dict, using defaults")
            return cls(path=path, config=fallback)
        try:
            config = ChartConfig.from_dict(chart_raw)
        except ChartConfigError as e:
            logger.warning("Invalid chart config in %s: %s, using defaults", path, e)
            return cls(path=path, config=fallback)
        return cls(path=path, config=config)

    def to_json_dict(self) -> dict[str, Any]:
        return {"schema_version": SCHEMA_VERSION, "chart": self.config.to_dict()}

    def save(self) -> None:
        """Write config to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self.to_json_dict(), indent=2), encoding="utf-8")
        logger.info("Saved chart config to %s", self.path)
