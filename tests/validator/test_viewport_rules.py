# tests/validator/test_viewport_rules.py
import json

import pytest

from amp_sanitizer.validator.boilerplate import (
    AMP_BOILERPLATE_NOSCRIPT_STYLE,
    AMP_BOILERPLATE_STYLE,
    get_boilerplate_stylesheets,
)
from amp_sanitizer.validator.viewport import DEFAULT_VIEWPORT_RULES, ViewportProperty, ViewportRuleTable


def test_default_rules_match_amp_validator():
    """De standaardtabel bevat de AMP viewport-eigenschappen."""
    assert set(DEFAULT_VIEWPORT_RULES.properties) == {
        "height", "initial-scale", "maximum-scale", "minimum-scale",
        "shrink-to-fit", "user-scalable", "viewport-fit", "width",
    }
    assert DEFAULT_VIEWPORT_RULES.mandated_value("width") == "device-width"
    assert DEFAULT_VIEWPORT_RULES.mandated_value("initial-scale") is None
    assert DEFAULT_VIEWPORT_RULES.width_value == "device-width"


def test_from_mapping_accepts_empty_entries():
    """Lege of ontbrekende regels zijn toegestaan zonder vaste waarde."""
    rules = ViewportRuleTable.from_mapping({"width": {"value": "320"}, "height": None})
    assert rules.allows("height")
    assert not rules.allows("zoom")
    assert rules.width_value == "320"


def test_width_value_defaults_to_device_width():
    assert ViewportRuleTable().width_value == "device-width"


def test_from_json_file(tmp_path):
    """Een regeltabel kan uit JSON worden geladen."""
    path = tmp_path / "viewport.json"
    path.write_text(json.dumps({"width": {"value": "device-width"}, "initial-scale": {}}))

    rules = ViewportRuleTable.from_json_file(path)
    assert rules.allows("initial-scale")
    assert rules.mandated_value("width") == "device-width"


def test_from_json_file_rejects_non_object(tmp_path):
    """Een JSON-bestand zonder object geeft een ValueError."""
    path = tmp_path / "viewport.json"
    path.write_text(json.dumps(["width"]))

    with pytest.raises(ValueError):
        ViewportRuleTable.from_json_file(path)


def test_boilerplate_stylesheets():
    visible, noscript = get_boilerplate_stylesheets()
    assert visible == AMP_BOILERPLATE_STYLE
    assert noscript == AMP_BOILERPLATE_NOSCRIPT_STYLE
    assert "-amp-start" in visible
    assert "animation:none" in noscript


def test_from_mapping_rejects_non_object_entries():
    """Een regel die geen object is, geeft een ValueError in plaats van een TypeError."""
    with pytest.raises(ValueError):
        ViewportRuleTable.from_mapping({"width": 5})


def test_viewport_property_only_carries_a_value():
    """Een eigenschap heeft alleen een optionele vaste waarde."""
    assert set(ViewportProperty.model_fields) == {"value"}
