"""CLI entrypoints for staticbundle commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config import BundleConfig, load_config
from .convert import CONVERTER_NAMES, converter_for
from .discovery import ResourceFiles, exclude_filter
from .errors import FilesystemError, StaticBundleError
from .generate import GenerationResult, ModuleGenerators
from .logging import configure_logging, get_logger
from .storage import ResourceStorages


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
        "default": argparse.SUPPRESS if suppress_default else False,
    }
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_source_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=None,
        help="Directory to bundle (defaults to `root` from the config, else the current directory).",
    )
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .staticbundle.yml or the directory containing it.",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Gitignore-style pattern to leave out (repeatable).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="staticbundle",
        description="Embed a directory of static files into generated Python modules.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Generate the resource modules for a directory.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_source_options(build_parser)
    build_parser.add_argument("--out-dir", help="Output root (overrides STATICBUNDLE_OUT_DIR).")
    build_parser.add_argument("--name", help="Name of the generated function.")
    build_parser.add_argument("--module", help="Name of the generated module directory.")
    build_parser.add_argument("--filename", help="Name of the top-level generated file.")
    build_parser.add_argument("--package", help="Dotted package that contains the output root.")
    split_group = build_parser.add_mutually_exclusive_group()
    split_group.add_argument(
        "--split-count", type=int, metavar="N", help="Start a new set after N resources."
    )
    split_group.add_argument(
        "--split-size", type=int, metavar="BYTES", help="Start a new set after BYTES of source data."
    )
    build_parser.add_argument(
        "--sort",
        action="store_true",
        default=None,
        help="Emit resources ordered by logical path for reproducible output.",
    )
    build_parser.add_argument("--compress", choices=CONVERTER_NAMES, help="Payload converter.")
    build_parser.add_argument(
        "--storage", choices=ResourceStorages.names(), help="Index representation."
    )

    list_parser = subparsers.add_parser(
        "list",
        help="Print the logical paths that would be bundled.",
    )
    _add_verbose_option(list_parser, suppress_default=True)
    _add_source_options(list_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for staticbundle commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        config = load_config(Path(args.config))
        if args.command == "build":
            result = run_build(args, config)
            print(
                f"Bundled {result.resource_count} resources in {len(result.units)} sets "
                f"into {_relativize(result.top_level)}"
            )
        elif args.command == "list":
            for line in run_list(args, config):
                print(line)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except StaticBundleError as exc:
        get_logger("cli").debug("Command failed", exc_info=True)
        parser.exit(1, f"staticbundle {args.command} failed: {exc}\n")
    except ValueError as exc:
        parser.exit(2, f"staticbundle {args.command}: {exc}\n")


def run_build(args: argparse.Namespace, config: BundleConfig) -> GenerationResult:
    resources = _resource_files(args, config, sort=True if args.sort else None)

    converter = converter_for(args.compress or config.compression)
    storage = ResourceStorages.by_name(args.storage or config.storage)

    if args.split_count is not None:
        split = ModuleGenerators.split_by_count(args.split_count)
        split.templates_dir = config.templates_dir
    elif args.split_size is not None:
        split = ModuleGenerators.split_by_size(args.split_size)
        split.templates_dir = config.templates_dir
    else:
        split = config.split_options()

    options = config.function_options()
    if args.out_dir:
        options = options.with_path(args.out_dir)
    if args.name:
        options = options.with_name(args.name)
    if args.module:
        options = options.with_module_name(args.module)
    if args.filename:
        options = options.with_filename(args.filename)
    if args.package:
        options = options.with_package(args.package)

    return (
        resources.convert(converter)
        .generate(storage)
        .module_generator(split)
        .write_function(options)
    )


def run_list(args: argparse.Namespace, config: BundleConfig) -> List[str]:
    lines: List[str] = []
    for item in _resource_files(args, config, sort=True):
        if isinstance(item, FilesystemError):
            raise item
        lines.append(f"{item.logical_path}\t{item.mime_type}")
    return lines


def _resource_files(
    args: argparse.Namespace, config: BundleConfig, *, sort: Optional[bool] = None
) -> ResourceFiles:
    if args.root is not None:
        root = Path(args.root)
    else:
        root = config.root or Path.cwd()
    patterns = [*config.exclude_paths, *args.exclude]
    resource_filter = exclude_filter(root, patterns) if patterns else None
    return ResourceFiles(
        root,
        filter=resource_filter,
        sort=config.sort if sort is None else sort,
    )


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
