from __future__ import annotations

import argparse
import logging

from wp_palette.src.palette_pipeline.config import load_config
from wp_palette.src.palette_pipeline.io import MalformedDocumentError
from wp_palette.src.palette_pipeline.models import ColorRecord
from wp_palette.src.palette_pipeline.naming import build_record
from wp_palette.src.palette_pipeline.pipeline import FilePublisher, PalettePipeline


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wp-palette",
        description="Build a WordPress color palette from Sass color maps.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser(
        "build",
        help="Extract, classify and sort colors, then write the palette document.",
    )
    build.add_argument(
        "--config", default=None, help="Optional JSON file with palette options."
    )
    build.add_argument(
        "--output", default=None, help="Output file name (default: theme.json)."
    )
    build.add_argument(
        "--output-prepend",
        default=None,
        help="Path prefix prepended to the output file name.",
    )
    mode = build.add_mutually_exclusive_group()
    mode.add_argument(
        "--theme-json",
        dest="wp_theme_json",
        action="store_const",
        const=True,
        default=None,
        help="Merge the palette into a theme.json document (default).",
    )
    mode.add_argument(
        "--flat",
        dest="wp_theme_json",
        action="store_const",
        const=False,
        help="Write the palette as a flat JSON array.",
    )
    build.add_argument(
        "--pretty",
        action="store_const",
        const=True,
        default=None,
        help="Pretty print flat output. theme.json output is always pretty printed.",
    )
    build.add_argument(
        "--source-document",
        default=None,
        help="Existing theme.json to merge into. Defaults to the output file name.",
    )
    build.add_argument("--sass-path", default=None, help="Directory of Sass files.")
    build.add_argument(
        "--sass-file",
        action="append",
        default=None,
        help="Sass file to read, relative to --sass-path. Repeatable.",
    )
    build.add_argument(
        "--variable",
        action="append",
        default=None,
        help="Sass map variable holding colors, e.g. colors or $colors. Repeatable.",
    )
    build.add_argument(
        "--blacklist",
        action="append",
        default=None,
        help="Color value or slug to exclude. Repeatable; replaces the configured list.",
    )
    build.add_argument(
        "--blacklist-match",
        choices=["slug", "color", "both"],
        default=None,
        help="Which record field the blacklist is matched against.",
    )
    build.add_argument(
        "--color",
        action="append",
        default=[],
        metavar="SLUG=VALUE",
        help="Extra color merged after the Sass colors. Repeatable.",
    )
    build.add_argument(
        "--stdout",
        action="store_true",
        help="Print the document instead of writing it.",
    )
    build.add_argument(
        "--verbose", action="store_true", help="Enable debug logging."
    )

    return parser


def _parse_color_arg(parser: argparse.ArgumentParser, raw: str) -> ColorRecord:
    slug, sep, value = raw.partition("=")
    slug = slug.strip().lstrip("$")
    if not sep or not slug or not value.strip():
        parser.error(f"invalid --color '{raw}', expected SLUG=VALUE")
    return build_record(slug, value)


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    if args.command == "build":
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(levelname)s:%(name)s:%(message)s",
        )
        config = load_config(
            args.config,
            output=args.output,
            output_prepend=args.output_prepend,
            wp_theme_json=args.wp_theme_json,
            pretty=args.pretty,
            source_document=args.source_document,
            blacklist=args.blacklist,
            blacklist_match=args.blacklist_match,
            sass={
                "path": args.sass_path,
                "files": args.sass_file,
                "variables": args.variable,
            },
        )
        extra_colors = [_parse_color_arg(parser, raw) for raw in args.color]

        pipeline = PalettePipeline(config=config)
        try:
            if args.stdout:
                print(pipeline.render(extra_colors))
            else:
                pipeline.apply(FilePublisher(), extra_colors)
        except MalformedDocumentError as exc:
            parser.exit(1, f"error: {exc}\n")
        return

    parser.error("unknown command")


if __name__ == "__main__":
    main()
