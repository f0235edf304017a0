"""Command line interface.

Usage:
    localepack build [-c CONFIG] [--root DIR[:mod,...]]... [-o OUT_DIR]
                     [--file NAME] [--cjs NAME] [--dts NAME]
    localepack show  [-c CONFIG] [--root DIR[:mod,...]]...

Both commands also accept --include/--exclude globs, --locale-policy,
--validate-locales, --strict, --cwd and -v. With -c, options come from
the config file and --root/--include/--exclude are not allowed.

Exit Codes:
    0: Success (per-file warnings may have been printed)
    1: Compilation or I/O failure
    2: Configuration error
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace

from localepack import __version__
from localepack.build import build
from localepack.config import load_options
from localepack.diagnostics import CompilationError, ConfigurationError
from localepack.enums import LocalePolicy
from localepack.locale_utils import resolver_for_policy
from localepack.output import FileOutputTarget, render_esm
from localepack.plugin import LocalePackPlugin, PluginOptions

__all__ = ["main"]

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2

DEFAULT_FILE_NAME = "i18n.mjs"


def _parse_root(value: str) -> tuple[str, list[str]]:
    root, _, modules = value.partition(":")
    if not root:
        msg = f"invalid root {value!r}: expected DIR or DIR:mod1,mod2"
        raise argparse.ArgumentTypeError(msg)
    return root, [m for m in modules.split(",") if m]


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-c", "--config", help="TOML/JSON config file or pyproject.toml")
    parser.add_argument(
        "--root",
        dest="roots",
        action="append",
        type=_parse_root,
        default=[],
        metavar="DIR[:MOD,...]",
        help="Root directory and its submodule names (repeatable)",
    )
    parser.add_argument("--include", action="append", help="Glob of files to compile")
    parser.add_argument("--exclude", action="append", help="Glob of files to skip")
    parser.add_argument(
        "--locale-policy",
        choices=[str(p) for p in LocalePolicy],
        default=None,
        help="How a file's locale is determined (default: directory)",
    )
    parser.add_argument(
        "--validate-locales",
        action="store_true",
        help="Skip files whose locale is unknown to CLDR",
    )
    parser.add_argument(
        "--strict", action="store_true", help="Fail if any file cannot be compiled"
    )
    parser.add_argument("--cwd", help="Directory roots are relative to")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="localepack",
        description="Compile per-locale JSON translation trees into an i18n module.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = parser.add_subparsers(dest="command", required=True)

    build_parser = commands.add_parser("build", help="Write module assets to a directory")
    _add_source_arguments(build_parser)
    build_parser.add_argument("-o", "--out-dir", default="dist", help="Output directory")
    build_parser.add_argument("--file", dest="file_name", help="ESM asset name")
    build_parser.add_argument("--cjs", dest="cjs_file_name", help="CommonJS asset name")
    build_parser.add_argument("--dts", dest="dts_file_name", help="TypeScript declaration name")

    show_parser = commands.add_parser("show", help="Print the generated ESM module")
    _add_source_arguments(show_parser)

    return parser.parse_args(argv)


def _options_from_args(args: argparse.Namespace) -> PluginOptions:
    output_overrides = {
        key: getattr(args, key, None)
        for key in ("file_name", "cjs_file_name", "dts_file_name")
        if getattr(args, key, None) is not None
    }

    if args.config:
        if args.roots or args.include or args.exclude:
            msg = "--root, --include and --exclude cannot be combined with --config"
            raise ConfigurationError(msg)
        options = load_options(args.config)
        changes: dict[str, object] = {}
        if args.locale_policy is not None:
            changes["determine_locale"] = resolver_for_policy(args.locale_policy)
        if args.validate_locales:
            changes["validate_locales"] = True
        if args.strict:
            changes["strict"] = True
        if args.cwd:
            changes["cwd"] = args.cwd
        if output_overrides:
            if not isinstance(options.output, FileOutputTarget):
                msg = "--file/--cjs/--dts require file output in the config"
                raise ConfigurationError(msg)
            changes["output"] = replace(options.output, **output_overrides)
        return replace(options, **changes) if changes else options

    if not args.roots:
        msg = "Either --config or at least one --root is required"
        raise ConfigurationError(msg)
    output_overrides.setdefault("file_name", DEFAULT_FILE_NAME)
    extra: dict[str, object] = {"cwd": args.cwd} if args.cwd else {}
    return PluginOptions(
        output=FileOutputTarget(**output_overrides),
        roots=dict(args.roots),
        include=args.include,
        exclude=args.exclude,
        determine_locale=resolver_for_policy(args.locale_policy or LocalePolicy.DIRECTORY),
        validate_locales=args.validate_locales,
        strict=args.strict,
        **extra,
    )


def _run(args: argparse.Namespace) -> int:
    options = _options_from_args(args)

    if args.command == "show":
        result = LocalePackPlugin(options).compile()
        for diagnostic in result.diagnostics:
            print(f"warning: {diagnostic.format()}", file=sys.stderr)
        sys.stdout.write(render_esm(result))
        return EXIT_OK

    context = build(options, args.out_dir)
    for message in context.warnings:
        print(f"warning: {message}", file=sys.stderr)
    for path in context.written:
        print(path)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Run the localepack command line."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return _run(args)
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CONFIG
    except (CompilationError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
