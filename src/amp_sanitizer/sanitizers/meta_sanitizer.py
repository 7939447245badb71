# src/amp_sanitizer/sanitizers/meta_sanitizer.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from bs4 import Tag

from amp_sanitizer.dom.core import (
    ATTR_AMP_BOILERPLATE,
    ATTR_CHARSET,
    ATTR_CONTENT,
    ATTR_NAME,
    META_NAME_VIEWPORT,
    MetaCategory,
    classify_meta,
    normalize_content_whitespace,
)
from amp_sanitizer.dom.document import AmpDocument
from amp_sanitizer.model import AMP_ENCODING, AMP_VIEWPORT, SanitizerSettings
from amp_sanitizer.sanitizers.base import BaseSanitizer, SanitizerDefinition
from amp_sanitizer.validator.boilerplate import get_boilerplate_stylesheets
from amp_sanitizer.validator.viewport import DEFAULT_VIEWPORT_RULES, ViewportRuleTable

logger = logging.getLogger(__name__)

MetaTagGroups = Dict[MetaCategory, List[Tag]]


class MetaNormalizer(BaseSanitizer):
    """
    Ensures the required AMP markup in <head>.

    All <meta> elements are pulled out of the document, grouped, merged and
    written back at the top of <head> in the optimized loading order:
    charset, viewport, amp-script-src, then every other meta tag in its
    original order. The two AMP boilerplate blocks close the head.

    https://amp.dev/documentation/guides-and-tutorials/optimize-and-measure/optimize_amp/
    """

    def __init__(
            self,
            viewport_rules: ViewportRuleTable = DEFAULT_VIEWPORT_RULES,
            boilerplate_stylesheets: Optional[Sequence[str]] = None,
            encoding: str = AMP_ENCODING,
            default_viewport: str = AMP_VIEWPORT,
    ) -> None:
        self.viewport_rules = viewport_rules
        self.boilerplate_stylesheets = tuple(boilerplate_stylesheets or get_boilerplate_stylesheets())
        if len(self.boilerplate_stylesheets) != 2:
            raise ValueError("Expected exactly two boilerplate stylesheets (visible, noscript).")
        self.encoding = encoding
        self.default_viewport = default_viewport

    @classmethod
    def from_settings(cls, settings: SanitizerSettings) -> "MetaNormalizer":
        return cls(
            viewport_rules=settings.load_viewport_rules(),
            encoding=settings.encoding,
            default_viewport=settings.default_viewport,
        )

    def sanitize(self, document: AmpDocument) -> None:
        self.normalize(document)

    def normalize(self, document: AmpDocument) -> None:
        """Rewrites the meta tags and boilerplate of `document.head` in place."""
        meta_tags = self._extract_meta_tags(document)

        meta_tags[MetaCategory.CHARSET] = self._resolve_charset(document, meta_tags[MetaCategory.CHARSET])
        meta_tags[MetaCategory.VIEWPORT] = self._resolve_viewport(document, meta_tags[MetaCategory.VIEWPORT])
        meta_tags[MetaCategory.AMP_SCRIPT_SRC] = self._merge_amp_script_src(
            meta_tags[MetaCategory.AMP_SCRIPT_SRC]
        )

        self._reinsert_in_optimized_order(document, meta_tags)
        self._ensure_boilerplate_is_present(document)

    # -------- Extraction --------

    @staticmethod
    def _extract_meta_tags(document: AmpDocument) -> MetaTagGroups:
        """Detaches every <meta> element and sorts it into its category."""
        meta_tags: MetaTagGroups = {category: [] for category in MetaCategory}

        for element in document.meta_elements():
            element.extract()

            # Validators reject 'key = value'; collapse to 'key=value'.
            content = element.get(ATTR_CONTENT)
            if content is not None:
                element[ATTR_CONTENT] = normalize_content_whitespace(content)

            meta_tags[classify_meta(element)].append(element)

        logger.debug(
            "Extracted meta tags: %s",
            {category.value: len(elements) for category, elements in meta_tags.items()}
        )
        return meta_tags

    # -------- Per-category resolution --------

    def _resolve_charset(self, document: AmpDocument, elements: List[Tag]) -> List[Tag]:
        if not elements:
            return [document.create_element("meta", {ATTR_CHARSET: self.encoding})]
        if len(elements) > 1:
            logger.debug("Dropping %d duplicate charset meta tag(s).", len(elements) - 1)
        return elements[:1]

    def _resolve_viewport(self, document: AmpDocument, elements: List[Tag]) -> List[Tag]:
        if not elements:
            content = self.default_viewport
        else:
            content = self._build_viewport_content(self._parse_viewport_rules(elements))
            logger.debug("Merged %d viewport meta tag(s) into '%s'.", len(elements), content)

        return [document.create_element("meta", {ATTR_NAME: META_NAME_VIEWPORT, ATTR_CONTENT: content})]

    @staticmethod
    def _parse_viewport_rules(elements: List[Tag]) -> Dict[str, str]:
        """
        Collects 'name=value' pairs from all viewport tags.

        Tags are read in reverse, so the first declared tag is applied last
        and wins on conflicting names. Segments without '=' are skipped.
        """
        parsed_rules: Dict[str, str] = {}
        for element in reversed(elements):
            for rule in (element.get(ATTR_CONTENT) or "").split(","):
                name, sep, value = rule.partition("=")
                if not sep:
                    continue
                parsed_rules[name.strip()] = value.strip()
        return parsed_rules

    def _build_viewport_content(self, rules: Dict[str, str]) -> str:
        """Filters rules against the allow-list and serializes them as 'a=1,b=2'."""
        valid_rules: Dict[str, str] = {}
        for name, value in rules.items():
            if not self.viewport_rules.allows(name):
                continue
            mandated = self.viewport_rules.mandated_value(name)
            valid_rules[name] = mandated if mandated is not None else value

        valid_rules["width"] = self.viewport_rules.width_value

        return ",".join(f"{name}={value}" for name, value in valid_rules.items())

    @staticmethod
    def _merge_amp_script_src(elements: List[Tag]) -> List[Tag]:
        """Concatenates all amp-script-src contents into the first tag, dropping the rest."""
        if not elements:
            return elements

        first = elements[0]
        first[ATTR_CONTENT] = " ".join(element.get(ATTR_CONTENT, "") for element in elements)
        return [first]

    # -------- Reconstruction --------

    @staticmethod
    def _reinsert_in_optimized_order(document: AmpDocument, meta_tags: MetaTagGroups) -> None:
        """Writes the groups back at the start of <head>, in MetaCategory order."""
        head = document.head
        previous: Optional[Tag] = None
        for category in MetaCategory:
            for element in meta_tags[category]:
                if previous is None:
                    head.insert(0, element)
                else:
                    previous.insert_after(element)
                previous = element

    def _ensure_boilerplate_is_present(self, document: AmpDocument) -> None:
        """
        Moves (or creates) style[amp-boilerplate] and noscript>style[amp-boilerplate]
        to the end of <head>, so custom styles cannot override them.
        """
        visible_css, noscript_css = self.boilerplate_stylesheets
        head = document.head

        style = self._find_boilerplate_style(head)
        if style is None:
            style = self._create_boilerplate_style(document, visible_css)
        else:
            style.extract()
        head.append(style)

        noscript = self._find_boilerplate_noscript(head)
        if noscript is None:
            noscript = document.create_element("noscript")
            noscript.append(self._create_boilerplate_style(document, noscript_css))
        else:
            noscript.extract()
        head.append(noscript)

    @staticmethod
    def _find_boilerplate_style(parent: Tag) -> Optional[Tag]:
        for style in parent.find_all("style", recursive=False):
            if style.has_attr(ATTR_AMP_BOILERPLATE):
                return style
        return None

    @classmethod
    def _find_boilerplate_noscript(cls, head: Tag) -> Optional[Tag]:
        for noscript in head.find_all("noscript", recursive=False):
            if cls._find_boilerplate_style(noscript) is not None:
                return noscript
        return None

    @staticmethod
    def _create_boilerplate_style(document: AmpDocument, css: str) -> Tag:
        return document.create_element("style", {ATTR_AMP_BOILERPLATE: ""}, css)


# --- SANITIZER DEFINITION ---
DEFINITION = SanitizerDefinition(
    name="meta",
    factory=MetaNormalizer.from_settings,
)
