# src/amp_sanitizer/sanitizers/registry.py
import importlib
import logging
import pkgutil
from typing import Dict, List, Optional

from .base import SanitizerDefinition

logger = logging.getLogger(__name__)


class SanitizerRegistry:
    """
    Central registry for document sanitizers.

    Dynamically discovers SanitizerDefinition objects from the modules of the
    'amp_sanitizer.sanitizers' package.
    """

    _definitions: Dict[str, SanitizerDefinition] = {}
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """
        Registers every module in 'amp_sanitizer.sanitizers' that exposes a
        `DEFINITION` attribute (instance of `SanitizerDefinition`).
        """
        if cls._loaded:
            return

        try:
            import amp_sanitizer.sanitizers as sanitizers_pkg

            for _, name, _ in pkgutil.iter_modules(sanitizers_pkg.__path__):
                full_name = f"amp_sanitizer.sanitizers.{name}"
                try:
                    module = importlib.import_module(full_name)
                    defn = getattr(module, "DEFINITION", None)
                    if isinstance(defn, SanitizerDefinition):
                        cls.register(defn)
                except Exception as e:
                    logger.error(f"Error loading sanitizer module {name}: {e}")

            cls._loaded = True
        except ImportError as e:
            logger.error(f"Could not find sanitizers package: {e}")

    @classmethod
    def register(cls, definition: SanitizerDefinition) -> None:
        cls._definitions[definition.name] = definition
        logger.debug(f"Sanitizer registered: {definition.name}")

    @classmethod
    def get(cls, name: str) -> Optional[SanitizerDefinition]:
        """Retrieves the definition registered under `name`."""
        return cls._definitions.get(name)

    @classmethod
    def names(cls) -> List[str]:
        return sorted(cls._definitions)
