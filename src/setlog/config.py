"""Configuration management for setlog."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

SETLOG_HOME = Path(os.environ.get("SETLOG_HOME", Path.home() / ".setlog"))
SETTINGS_FILE = SETLOG_HOME / "settings.json"
VAULT_DIR = Path(os.environ.get("SETLOG_VAULT", "."))

DEFAULT_TASKS_FILE = "Тренировки/Все упражнения.md"
MODAL_SIZES = ("small", "normal", "large")
MODAL_SPACINGS = ("compact", "normal", "spacious")


@dataclass
class Settings:
    """Persisted settings. The UI-only keys are stored but never interpreted here."""

    tasks_file_path: str = DEFAULT_TASKS_FILE
    # Last selected exercise when the final set was not logged yet; "" means none
    remembered_exercise: str = ""
    modal_size: str = "normal"
    modal_spacing: str = "normal"
    collapsed_groups: set[str] = field(default_factory=set)

    def to_dict(self) -> dict:
        return {
            "tasks_file_path": self.tasks_file_path,
            "remembered_exercise": self.remembered_exercise,
            "modal_size": self.modal_size,
            "modal_spacing": self.modal_spacing,
            "collapsed_groups": sorted(self.collapsed_groups),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Build settings from a mapping; missing keys use defaults."""
        settings = cls()
        if data.get("tasks_file_path"):
            settings.tasks_file_path = str(data["tasks_file_path"])
        settings.remembered_exercise = str(data.get("remembered_exercise") or "")
        settings.modal_size = _choice("modal_size", data.get("modal_size"), MODAL_SIZES)
        settings.modal_spacing = _choice("modal_spacing", data.get("modal_spacing"), MODAL_SPACINGS)
        groups = data.get("collapsed_groups") or []
        if isinstance(groups, (list, tuple, set)):
            settings.collapsed_groups = {str(g).lower() for g in groups}
        else:
            logger.warning(f"Ignoring collapsed_groups of type {type(groups).__name__}")
        return settings

    def save(self, path: Path | None = None) -> None:
        """Save settings to file."""
        path = path or SETTINGS_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n")


def _choice(key: str, value, allowed: tuple[str, ...]) -> str:
    if value is None:
        return "normal"
    if value not in allowed:
        logger.warning(f"Unknown {key} {value!r}, using 'normal'")
        return "normal"
    return value


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from settings.json, falling back to defaults."""
    path = path or SETTINGS_FILE
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to parse {path}: {e}")
        return Settings()
    if not isinstance(data, dict):
        logger.warning(f"Ignoring {path}: expected a JSON object")
        return Settings()
    return Settings.from_dict(data)
