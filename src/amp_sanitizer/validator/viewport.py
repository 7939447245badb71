# src/amp_sanitizer/validator/viewport.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEVICE_WIDTH = "device-width"


class ViewportProperty(BaseModel):
    """
    Validator rule for one property of meta[name=viewport] content.
    A set `value` means the property may only carry that exact value.
    """
    value: Optional[str] = None


class ViewportRuleTable(BaseModel):
    """
    Allow-list of viewport content properties, keyed by rule name.

    Mirrors the `value_properties` table of the AMP validator's
    `meta name=viewport` tag definition.
    """
    properties: Dict[str, ViewportProperty] = Field(default_factory=dict)

    @classmethod
    def from_mapping(cls, table: Mapping[str, Optional[Mapping[str, Any]]]) -> "ViewportRuleTable":
        """
        Builds a rule table from `{rule_name: {"value": mandated_value}}`; entries may be empty.

        Raises:
            ValueError: If an entry is neither empty nor a mapping.
        """
        properties: Dict[str, ViewportProperty] = {}
        for name, rule in table.items():
            if rule is None:
                rule = {}
            if not isinstance(rule, Mapping):
                raise ValueError(
                    f"Viewport rule '{name}' must be an object, got {type(rule).__name__}."
                )
            properties[str(name)] = ViewportProperty(**rule)
        return cls(properties=properties)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "ViewportRuleTable":
        """
        Loads a rule table from a JSON file of the `from_mapping` shape.

        Raises:
            ValueError: If the file does not hold a valid rule table.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Viewport rule table at {path} must be a JSON object, got {type(data).__name__}.")
        logger.debug("Loaded %d viewport properties from %s", len(data), path)
        return cls.from_mapping(data)

    def allows(self, name: str) -> bool:
        return name in self.properties

    def mandated_value(self, name: str) -> Optional[str]:
        prop = self.properties.get(name)
        return prop.value if prop else None

    @property
    def width_value(self) -> str:
        """The value `width` is pinned to in every normalized viewport."""
        return self.mandated_value("width") or DEVICE_WIDTH


# https://github.com/ampproject/amphtml/blob/main/validator/validator-main.protoascii
DEFAULT_VIEWPORT_RULES = ViewportRuleTable.from_mapping({
    "height": {},
    "initial-scale": {},
    "maximum-scale": {},
    "minimum-scale": {},
    "shrink-to-fit": {},
    "user-scalable": {},
    "viewport-fit": {},
    "width": {"value": DEVICE_WIDTH},
})
