"""CLI entry and startup wiring."""

from __future__ import annotations

import argparse
from pathlib import Path

from .config import load_config, map_path
from .converters import build_converter
from .coverage import CoverageTracker
from .document_gateway import read_document, write_normalized_outputs
from .errors import ProvdocsError
from .logging import log_event, setup_logging
from .pipeline import normalize_document
from .presenters import render_document_summary, render_error


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        setup_logging(config.log_file)
        out_dir_abs = map_path(args.out_dir, Path.cwd())
        converter = build_converter(config)
        coverage = CoverageTracker(config.provider_name, config.provider_version)

        for raw_path in args.files:
            source_path_abs = map_path(raw_path, Path.cwd())
            document = normalize_document(
                read_document(source_path_abs),
                name=source_path_abs.stem,
                config=config,
                converter=converter,
                coverage=coverage,
            )
            markdown_path, model_path = write_normalized_outputs(
                document=document, out_dir_abs=out_dir_abs
            )
            log_event(
                "output_written",
                document=document.name,
                markdown_file=markdown_path,
                model_file=model_path,
            )
            for line in render_document_summary(
                document=document,
                markdown_path=markdown_path,
                model_path=model_path,
            ):
                print(line)

        if config.coverage_file is not None:
            coverage.export_json(config.coverage_file)
        return 0
    except ProvdocsError as exc:
        log_event("cli_error", error_type=type(exc).__name__, error=str(exc))
        print(render_error(str(exc)))
        return 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="provdocs",
        description="Normalize provider reference documentation.",
    )
    parser.add_argument(
        "--config",
        required=True,
        help="Path to the JSON profile (absolute, relative, or mapped with ~).",
    )
    parser.add_argument(
        "--out-dir",
        required=True,
        help="Directory that receives the normalized .md and .json outputs.",
    )
    parser.add_argument(
        "files",
        nargs="+",
        help="Markdown reference documents to normalize.",
    )
    return parser
