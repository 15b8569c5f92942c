"""Command-line interface: convert saved HTML (or a JSON snapshot) to Markdown.

Usage:
  # HTML file to stdout
  domdown page.html

  # Save Markdown and extracted images next to it
  domdown turn.html -o export/turn.md

  # AI Studio DevTools dump, stripped of buttons and icons
  pbpaste | domdown - --ai-studio-chrome -o chat.md

  # A snapshot serialized in the browser
  domdown snapshot.json --snapshot --dialect plain

Exit status: 0 on success, 1 if any embedded image failed to decode,
2 on usage or input errors.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from domdown.cleanup import Policy, ai_studio_chrome, identity, strip_selectors
from domdown.config import DIALECTS, RenderConfig
from domdown.errors import DomdownError
from domdown.images import CollectedImage
from domdown.parser import parse_html
from domdown.renderers.markdown import MarkdownRenderer
from domdown.serialization import from_json
from domdown.utils.logger import get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_IMAGES_FAILED = 1
EXIT_USAGE = 2


def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="domdown",
        description="Convert HTML or a DOM snapshot to Markdown, extracting embedded images.",
    )
    ap.add_argument("input", help="Input file, or '-' for stdin.")
    ap.add_argument("-o", "--out", dest="output", help="Markdown output file (defaults to stdout).")
    ap.add_argument(
        "--images-dir",
        help="Where extracted images are written (defaults to the output file's directory, or the cwd).",
    )
    ap.add_argument(
        "--no-extract-images",
        dest="extract_images",
        action="store_false",
        help="Keep data: URIs inline instead of extracting them.",
    )
    ap.add_argument("--snapshot", action="store_true", help="Input is a JSON tree snapshot, not HTML.")
    ap.add_argument(
        "--dialect",
        choices=sorted(DIALECTS),
        default="ai-studio",
        help="Markup dialect (transparent tags, spinner and inline-code rules).",
    )
    ap.add_argument(
        "--transparent",
        action="append",
        default=[],
        metavar="TAG",
        help="Extra wrapper tag to unwrap (repeatable).",
    )
    ap.add_argument(
        "--strip",
        action="append",
        default=[],
        metavar="SELECTOR",
        help="Remove elements matching a selector before rendering (repeatable).",
    )
    ap.add_argument(
        "--ai-studio-chrome",
        action="store_true",
        help="Remove AI Studio buttons, icons and role labels before rendering.",
    )
    ap.add_argument("--keep-whitespace", action="store_true", help="Keep indentation-only text nodes.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return ap


def read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def build_config(args: argparse.Namespace) -> RenderConfig:
    config = dataclasses.replace(DIALECTS[args.dialect], extract_images=args.extract_images)
    if args.transparent:
        config = config.with_transparent(*args.transparent)
    return config


def build_policy(args: argparse.Namespace) -> Policy:
    policy = ai_studio_chrome if args.ai_studio_chrome else identity
    if args.strip:
        policy = policy | strip_selectors(*args.strip)
    return policy


def write_images(images: Sequence[CollectedImage], directory: Path) -> list[Path]:
    """Write extracted images into ``directory`` (created if missing)."""
    if not images:
        return []
    directory.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for img in images:
        target = directory / img.filename
        target.write_bytes(img.data)
        logger.debug("Wrote %s (%s, %d bytes)", target, img.mime_type, len(img.data))
        written.append(target)
    return written


def main(argv: Sequence[str] | None = None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        source = read_input(args.input)
        tree = from_json(source) if args.snapshot else parse_html(source, keep_whitespace=args.keep_whitespace)
        policy = build_policy(args)
        result = MarkdownRenderer(build_config(args)).render(policy(tree))

        if args.output:
            out_path = Path(args.output)
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_text(result.markdown + "\n", encoding="utf-8")
            default_dir = out_path.parent
        else:
            sys.stdout.write(result.markdown + "\n")
            default_dir = Path.cwd()

        images_dir = Path(args.images_dir) if args.images_dir else default_dir
        write_images(result.images, images_dir)
    except (DomdownError, OSError) as e:
        print(f"domdown: error: {e}", file=sys.stderr)
        return EXIT_USAGE

    if result.failed_images:
        print(
            f"domdown: {len(result.failed_images)} image(s) failed to extract: "
            + ", ".join(result.failed_images),
            file=sys.stderr,
        )
        return EXIT_IMAGES_FAILED
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
