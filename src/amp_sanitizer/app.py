from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from amp_sanitizer.controllers.sanitize_controller import SanitizeController
from amp_sanitizer.core.managers.config_manager import config_manager
from amp_sanitizer.core.utils.configure_logging import configure_logger
from amp_sanitizer.model import SanitizerSettings

logger = logging.getLogger(__name__)

USAGE = """
Examples:
  amp-sanitize page.html                     Print the sanitized page to stdout.
  amp-sanitize *.html --output-dir out/      Write sanitized copies to out/, keeping sub folders.
  amp-sanitize *.html --in-place             Rewrite the files themselves.
  amp-sanitize page.html --set sanitizer.viewport_rules_path=rules.json
  amp-sanitize --show-config --set sanitizer.enabled=meta
""".strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="amp-sanitize",
        description="Rewrite the <head> of HTML pages into the markup AMP requires.",
        epilog=USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("paths", nargs="*", metavar="PATH", help="HTML file(s) to sanitize.")
    target = parser.add_mutually_exclusive_group()
    target.add_argument("--output-dir", "-o", default=None, help="Directory for the sanitized copies.")
    target.add_argument("--in-place", action="store_true", help="Overwrite the input files.")
    parser.add_argument("--set", dest="overrides", action="append", default=[], metavar="KEY=VALUE",
                        help="Override a settings.json value for this run (e.g., sanitizer.encoding=utf-8).")
    parser.add_argument("--show-config", action="store_true",
                        help="Print the effective configuration as JSON and exit.")
    parser.add_argument("--log-level", default=None,
                        help="Logging level (default: debug.level from settings.json).")
    parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint for the amp-sanitize command."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return 0 if e.code == 0 else 1

    # Every run starts from settings.json; overrides never leak between runs.
    config_manager.reset()
    rejected = config_manager.apply_overrides(args.overrides)
    if rejected:
        for assignment in rejected:
            print(f"Error: invalid --set '{assignment}' (expected KEY=VALUE).", file=sys.stderr)
        return 1

    if args.show_config:
        print(json.dumps(config_manager.get_all(), indent=2))
        return 0

    if not args.paths:
        parser.print_usage(sys.stderr)
        print("Error: at least one PATH is required.", file=sys.stderr)
        return 1

    configure_logger(args.log_level or config_manager.get_nested("debug.level", "WARNING"))
    try:
        settings = SanitizerSettings.from_config(config_manager)
    except ValidationError as e:
        print(f"Error: invalid sanitizer configuration:\n{e}", file=sys.stderr)
        return 1
    controller = SanitizeController(settings)

    if args.output_dir is None and not args.in_place:
        if len(args.paths) != 1:
            print("Error: multiple inputs need --output-dir or --in-place.", file=sys.stderr)
            return 1
        try:
            with open(args.paths[0], "r", encoding="utf-8") as f:
                html = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Could not read %s: %s", args.paths[0], e)
            return 1
        sys.stdout.write(controller.sanitize_html(html))
        return 0

    report = controller.run(
        args.paths,
        output_dir=args.output_dir,
        in_place=args.in_place,
        show_progress=not args.no_progress,
    )
    for failed in report.failed:
        print(f"❌ Failed: {failed}", file=sys.stderr)
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
