"""Command-line entry point: ``promptdoc render|frontmatter|parse FILE``."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from promptdoc import __version__
from promptdoc.frontmatter.errors import FrontmatterError
from promptdoc.models.errors import Diagnostic
from promptdoc.parser.document import parse_lines
from promptdoc.pipeline.pipeline import PromptPipeline
from promptdoc.processor.processor import Processor
from promptdoc.service.dispatcher import Dispatcher
from promptdoc.settings import Settings

logger = logging.getLogger("promptdoc.cli")


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return repr(value)


def _read_lines(path: Path) -> list[str]:
    with path.open("r", encoding="utf-8") as handle:
        return handle.read().splitlines()


def _report(diagnostics: list[Diagnostic]) -> None:
    for diagnostic in diagnostics:
        print(diagnostic.format(), file=sys.stderr)


def _cmd_render(args: argparse.Namespace, settings: Settings) -> int:
    dispatcher = Dispatcher(PromptPipeline(Processor(settings=settings)))
    result = dispatcher.dispatch_file(args.file)
    print(result.prompt.model_dump_json(indent=2))
    _report(result.diagnostics)
    return 0


def _cmd_frontmatter(args: argparse.Namespace, settings: Settings) -> int:
    processor = Processor(settings=settings)
    evaluated = processor.evaluate_buffer_frontmatter(_read_lines(args.file), str(args.file))
    print(json.dumps(evaluated.variables, indent=2, default=_json_default))
    _report(evaluated.diagnostics)
    return 0


def _cmd_parse(args: argparse.Namespace, settings: Settings) -> int:
    document = parse_lines(_read_lines(args.file))
    print(json.dumps(dataclasses.asdict(document), indent=2, default=_json_default))
    return 0


_COMMANDS = {
    "render": _cmd_render,
    "frontmatter": _cmd_frontmatter,
    "parse": _cmd_parse,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="promptdoc", description="Chat document toolkit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (
        ("render", "evaluate a document and print the assembled prompt as JSON"),
        ("frontmatter", "evaluate only the frontmatter and print its variables"),
        ("parse", "print the parsed document structure"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("file", type=Path)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    args = build_parser().parse_args(argv)
    logger.debug("promptdoc v%s: %s %s", __version__, args.command, args.file)

    try:
        return _COMMANDS[args.command](args, settings)
    except FrontmatterError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
