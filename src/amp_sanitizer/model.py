# ============================================
# file: src/amp_sanitizer/model.py
# ============================================
from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from amp_sanitizer.validator.viewport import DEFAULT_VIEWPORT_RULES, ViewportRuleTable

logger = logging.getLogger(__name__)

AMP_ENCODING = "utf-8"
AMP_VIEWPORT = "width=device-width"


class SanitizerSettings(BaseModel):
    """Typed view over the 'sanitizer' section of settings.json."""
    enabled: List[str] = Field(default_factory=lambda: ["meta"])
    encoding: str = AMP_ENCODING
    default_viewport: str = AMP_VIEWPORT
    viewport_rules_path: Optional[str] = None

    @classmethod
    def from_config(cls, config) -> "SanitizerSettings":
        """Builds settings from a ConfigManager, ignoring unset keys."""
        section = config.get_nested("sanitizer", {}) or {}
        return cls(**{k: v for k, v in section.items() if v is not None})

    def load_viewport_rules(self) -> ViewportRuleTable:
        """Loads the configured viewport rule table, falling back to the AMP defaults."""
        if not self.viewport_rules_path:
            return DEFAULT_VIEWPORT_RULES
        try:
            return ViewportRuleTable.from_json_file(self.viewport_rules_path)
        except (OSError, ValueError) as e:
            logger.error(
                "Could not load viewport rules from %s: %s. Using AMP defaults.",
                self.viewport_rules_path, e, exc_info=True
            )
            return DEFAULT_VIEWPORT_RULES


class SanitizeReport(BaseModel):
    processed: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed
