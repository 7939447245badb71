# src/amp_sanitizer/dom/document.py
import logging
from typing import Dict, List, Optional

from bs4 import BeautifulSoup, Doctype, Tag

logger = logging.getLogger(__name__)


class AmpDocument:
    """
    Mutable HTML document handed to the sanitizers.

    Wraps a BeautifulSoup tree and guarantees a <head> element, so every
    sanitizer can rely on `document.head` being present. Sanitizers borrow
    the document for the duration of one pass; serialization is left to
    the caller.
    """

    def __init__(self, soup: BeautifulSoup):
        self.soup = soup
        self._head = self._ensure_head()

    @classmethod
    def from_html(cls, html: str, parser: str = "html.parser") -> "AmpDocument":
        """
        Parses raw HTML into an AmpDocument.

        Args:
            html (str): The raw HTML string.
            parser (str): The BeautifulSoup tree builder to use.

        Returns:
            AmpDocument: The parsed document with a guaranteed <head>.
        """
        # Basic cleanup of potentially dirty HTML (e.g., BOM)
        clean_html = (html or "").replace('\ufeff', '')
        return cls(BeautifulSoup(clean_html, parser))

    @property
    def head(self) -> Tag:
        return self._head

    def _ensure_head(self) -> Tag:
        head = self.soup.head
        if head is not None:
            return head

        head = self.soup.new_tag("head")
        if self.soup.html is not None:
            self.soup.html.insert(0, head)
        else:
            # Keep a leading doctype in front of the new head.
            position = 0
            for index, item in enumerate(self.soup.contents):
                if isinstance(item, Doctype):
                    position = index + 1
                    break
            self.soup.insert(position, head)
        logger.debug("Document had no <head>; created an empty one.")
        return head

    def create_element(
            self,
            name: str,
            attrs: Optional[Dict[str, str]] = None,
            text: Optional[str] = None
    ) -> Tag:
        """Creates a detached element owned by this document."""
        element = self.soup.new_tag(name, attrs=dict(attrs or {}))
        if text is not None:
            element.append(self.soup.new_string(text))
        return element

    def meta_elements(self) -> List[Tag]:
        """Returns every <meta> element under the document root, in document order."""
        return self.soup.find_all("meta")

    def serialize(self) -> str:
        return str(self.soup)
