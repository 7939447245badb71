# src/amp_sanitizer/sanitizers/base.py
import abc
from typing import Callable

from amp_sanitizer.dom.document import AmpDocument
from amp_sanitizer.model import SanitizerSettings


class BaseSanitizer(metaclass=abc.ABCMeta):
    """
    Abstract base class for all document sanitizers.

    Every sanitizer must inherit from this class and implement the 'sanitize' method.
    """
    @abc.abstractmethod
    def sanitize(self, document: AmpDocument) -> None:
        """
        Rewrites the document in place.

        Args:
            document: The AmpDocument to mutate. It is borrowed for the
                      duration of the call only.
        """
        raise NotImplementedError("Every sanitizer must implement a 'sanitize' method.")


class SanitizerDefinition:
    """
    Configuration object binding a sanitizer name to the factory that builds it.
    """

    def __init__(self, name: str, factory: Callable[[SanitizerSettings], BaseSanitizer]):
        self.name = name
        self.factory = factory

    def build(self, settings: SanitizerSettings) -> BaseSanitizer:
        return self.factory(settings)
