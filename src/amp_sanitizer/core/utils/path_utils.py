# src/amp_sanitizer/core/utils/path_utils.py
import logging
import os
from pathlib import Path
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package and output paths.
    """

    # --- Package specific paths

    @staticmethod
    def get_package_root() -> Path:
        """
        Returns the absolute path of the amp_sanitizer package.
        (e.g., /path/to/src/amp_sanitizer)
        """
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_settings_file() -> Path:
        """Returns the path to the bundled settings.json."""
        return PathUtils.get_package_root() / "settings.json"

    # --- Helper methods ---

    @staticmethod
    def get_common_root(sources: Iterable[Path]) -> Optional[Path]:
        """Returns the deepest directory containing every source file."""
        parents = [str(source.resolve().parent) for source in sources]
        if not parents:
            return None
        return Path(os.path.commonpath(parents))

    @staticmethod
    def get_output_path(
            source: Path,
            output_dir: Optional[Path] = None,
            root: Optional[Path] = None
    ) -> Path:
        """
        Returns the path a sanitized copy of `source` is written to.

        The copy keeps its location relative to `root` (default: the directory
        of `source`), so sources sharing a file name land in separate folders.
        Creates the target directory if it doesn't exist.
        Without an output directory, the source file itself is returned.
        """
        if output_dir is None:
            return source
        resolved = source.resolve()
        relative = resolved.relative_to(root) if root is not None else Path(resolved.name)
        target = output_dir / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        return target
