from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from tqdm.auto import tqdm

from amp_sanitizer.core.utils.path_utils import PathUtils
from amp_sanitizer.dom.document import AmpDocument
from amp_sanitizer.model import SanitizeReport, SanitizerSettings
from amp_sanitizer.sanitizers.base import BaseSanitizer
from amp_sanitizer.sanitizers.registry import SanitizerRegistry

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class SanitizeController:
    """
    Orchestrates the sanitizer pipeline over HTML documents and files.
    Sanitizers run in the order listed in the 'sanitizer.enabled' setting.
    """

    def __init__(
            self,
            settings: Optional[SanitizerSettings] = None,
            sanitizers: Optional[List[BaseSanitizer]] = None,
    ) -> None:
        self.settings = settings or SanitizerSettings()
        self.sanitizers = sanitizers if sanitizers is not None else self._build_pipeline(self.settings)

    @staticmethod
    def _build_pipeline(settings: SanitizerSettings) -> List[BaseSanitizer]:
        """Resolves the enabled sanitizer names through the registry."""
        SanitizerRegistry.discover()
        pipeline: List[BaseSanitizer] = []
        for name in settings.enabled:
            definition = SanitizerRegistry.get(name)
            if definition is None:
                logger.warning(
                    "Unknown sanitizer '%s' skipped. Available: %s",
                    name, ", ".join(SanitizerRegistry.names()) or "none"
                )
                continue
            pipeline.append(definition.build(settings))
        return pipeline

    # -------- Documents --------

    def sanitize_document(self, document: AmpDocument) -> AmpDocument:
        for sanitizer in self.sanitizers:
            sanitizer.sanitize(document)
        return document

    def sanitize_html(self, html: str) -> str:
        """Parses, sanitizes and serializes a single HTML string."""
        document = AmpDocument.from_html(html)
        return self.sanitize_document(document).serialize()

    # -------- Files --------

    def sanitize_file(self, path: PathLike, output_path: Optional[PathLike] = None) -> Path:
        """Sanitizes an HTML file; writes back to `path` unless `output_path` is given."""
        source = Path(path)
        target = Path(output_path) if output_path else source
        html = source.read_text(encoding="utf-8")
        target.write_text(self.sanitize_html(html), encoding="utf-8")
        logger.debug("Sanitized %s -> %s", source, target)
        return target

    def run(
            self,
            paths: Iterable[PathLike],
            *,
            output_dir: Optional[PathLike] = None,
            in_place: bool = False,
            show_progress: bool = True,
    ) -> SanitizeReport:
        """
        Sanitizes many files. A file that fails to read or write is logged
        and reported; the remaining files are still processed.
        """
        if output_dir is None and not in_place:
            raise ValueError("Either an output directory or in_place=True is required.")

        out_dir = None if in_place else Path(output_dir)
        report = SanitizeReport()
        sources = [Path(p) for p in paths]
        # Copies mirror the inputs' layout below their common parent directory.
        root = PathUtils.get_common_root(sources) if out_dir is not None else None
        written = set()
        iterator = sources if not show_progress else tqdm(sources, desc="Sanitizing", unit="file", leave=False)

        for source in iterator:
            try:
                target = PathUtils.get_output_path(source, out_dir, root)
                if target.resolve() in written:
                    logger.warning("Skipping %s: %s was already written in this run.", source, target)
                    report.failed.append(str(source))
                    continue
                self.sanitize_file(source, target)
                written.add(target.resolve())
                report.processed.append(str(target))
            except (OSError, UnicodeDecodeError) as e:
                logger.error("Failed to sanitize %s: %s", source, e, exc_info=True)
                report.failed.append(str(source))

        logger.info("Sanitized %d file(s), %d failed.", len(report.processed), len(report.failed))
        return report
