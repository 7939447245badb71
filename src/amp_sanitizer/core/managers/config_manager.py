# src/amp_sanitizer/core/managers/config_manager.py
import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from amp_sanitizer.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

_NULL_VALUES = {"null", "none", ""}


class ConfigManager:
    """
    Singleton holding the sanitizer configuration.

    Defaults come from the bundled settings.json; command line overrides
    ('--set sanitizer.encoding=utf-8') are applied on top, in memory only.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._config = {}
            cls._instance.reset()
        return cls._instance

    def get_all(self) -> Dict[str, Any]:
        """Returns the effective configuration, overrides included."""
        return self._config

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """Looks up a dotted key, e.g. 'sanitizer.encoding'; unset keys give `default`."""
        node: Any = self._config
        for key in key_path.split('.'):
            if not isinstance(node, dict):
                return default
            node = node.get(key)
        return default if node is None else node

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Stores `value` under a dotted key, creating intermediate sections.

        String values are coerced towards the type already stored there:
        comma separated for lists, 'null' clears the key, scalars are cast.
        Returns False when the path runs through a non-section value.
        """
        *parents, leaf = key_path.split('.')
        section = self._config
        for key in parents:
            section = section.setdefault(key, {})
            if not isinstance(section, dict):
                logger.error("Cannot set '%s': '%s' is not a section.", key_path, key)
                return False

        section[leaf] = self._coerce(key_path, section.get(leaf), value)
        logger.info("Configuration override: %s = %r", key_path, section[leaf])
        return True

    @staticmethod
    def _coerce(key_path: str, current: Any, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        if value.strip().lower() in _NULL_VALUES:
            return None
        if isinstance(current, list):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(current, bool):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        if current is not None and not isinstance(current, dict):
            try:
                return type(current)(value)
            except (ValueError, TypeError):
                logger.warning(
                    "Could not cast '%s' to %s for '%s'. Storing as string.",
                    value, type(current).__name__, key_path
                )
        return value

    def apply_overrides(self, assignments: Iterable[str]) -> List[str]:
        """
        Applies 'key.path=value' assignments with `set_nested`.
        Returns the assignments that were rejected.
        """
        rejected: List[str] = []
        for assignment in assignments:
            key_path, sep, value = assignment.partition("=")
            if not sep or not key_path.strip() or not self.set_nested(key_path.strip(), value):
                rejected.append(assignment)
        return rejected

    def reset(self):
        """Drops all overrides and reloads settings.json."""
        config_path = PathUtils.get_settings_file()
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                self._config = json.load(f)
            logger.debug("Configuration loaded from %s.", config_path)
        except FileNotFoundError:
            logger.warning("settings.json not found at %s. Using empty config.", config_path)
            self._config = {}
        except (OSError, ValueError) as e:
            logger.error("Failed to load %s: %s", config_path, e, exc_info=True)
            self._config = {}


# The global singleton instance that the entire application will use.
config_manager = ConfigManager()
