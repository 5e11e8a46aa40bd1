"""Per-profile settings for taskboard.

Each profile is one JSON file under ``user_config_dir("taskboard")``.
Settings are addressed with dotted keys such as ``api.endpoint`` or
``display.show_completed``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError

from taskboard.utils.logger import get_logger

APP_NAME = "taskboard"
DEFAULT_PROFILE = "default"


class APIConfig(BaseModel):
    """Where the task backend lives and how hard to try reaching it."""

    endpoint: str = "http://127.0.0.1:7878/api"
    timeout: int = Field(default=30, ge=1)
    retry: int = Field(default=3, ge=0)


class DisplayConfig(BaseModel):
    """Rendering switches for the schedule views."""

    show_completed: bool = True


class Config(BaseModel):
    api: APIConfig = Field(default_factory=APIConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)


def _lookup(node: Any, key: str) -> Any:
    for part in key.split("."):
        if not isinstance(node, BaseModel) or part not in type(node).model_fields:
            return None
        node = getattr(node, part)
    return node


class ConfigManager:
    """Loads, edits and persists the settings of one profile."""

    def __init__(self, profile: str = DEFAULT_PROFILE):
        self.profile = profile
        self.config_dir = Path(user_config_dir(APP_NAME))
        self.config_file = self.config_dir / f"{profile}.json"
        self._config: Config | None = None

    @property
    def config(self) -> Config:
        if self._config is None:
            self._config = self._load()
        return self._config

    def _load(self) -> Config:
        if not self.config_file.exists():
            return Config()
        try:
            return Config.model_validate_json(self.config_file.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            get_logger(__name__).warning(
                "ignoring unreadable config %s: %s", self.config_file, e
            )
            return Config()

    def save(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_file.write_text(self.config.model_dump_json(indent=2), encoding="utf-8")

    def get(self, key: str) -> Any:
        """Value at dotted *key*, or None when no such setting exists."""
        return _lookup(self.config, key)

    def set(self, key: str, value: Any) -> None:
        """Store *value* at dotted *key* and persist the profile.

        The whole config is re-validated, so strings like ``"10"`` are
        coerced to the setting's type.

        Raises:
            KeyError: If *key* does not name a single setting
            ValidationError: If *value* does not fit the setting
        """
        current = self.get(key)
        if current is None or isinstance(current, BaseModel):
            raise KeyError(key)

        data = self.config.model_dump()
        *sections, leaf = key.split(".")
        node = data
        for section in sections:
            node = node[section]
        node[leaf] = value

        self._config = Config.model_validate(data)
        self.save()

    def reset(self, key: str | None = None) -> None:
        """Restore one setting, or the whole profile, to its default."""
        if key is None:
            self._config = Config()
            self.save()
            return
        self.set(key, _lookup(Config(), key))

    def list_profiles(self) -> list[str]:
        return sorted(path.stem for path in self.config_dir.glob("*.json"))


_config_manager: ConfigManager | None = None


def get_config_manager(profile: str = DEFAULT_PROFILE) -> ConfigManager:
    """Process-wide manager, rebuilt when another profile is requested."""
    global _config_manager
    if _config_manager is None or _config_manager.profile != profile:
        _config_manager = ConfigManager(profile)
    return _config_manager
