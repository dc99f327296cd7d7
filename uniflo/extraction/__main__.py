"""
Package CLI entrypoint for syllabus parsing.

Usage:
  python -m uniflo.extraction parse <file> [--start-date YYYY-MM-DD] [--mode regex|llm]
  python -m uniflo.extraction normalize <file> --start-date YYYY-MM-DD
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import openai

from uniflo.config import Settings
from uniflo.extraction.document_text import DocumentTextError, detect_file_type, extract_document_text
from uniflo.extraction.llm_parser import ModelNotConfiguredError, ModelResponseError, SyllabusModelClient
from uniflo.extraction.pipeline import PARSE_MODES, run_parse
from uniflo.extraction.preprocessing import normalize_weeks


def _file_type_for(path: str) -> str:
    return detect_file_type(None, path)


def _cmd_parse(args: argparse.Namespace) -> int:
    settings = Settings.from_env()
    client = SyllabusModelClient(settings.model) if args.mode == "llm" else None

    try:
        outcome = run_parse(
            args.file,
            _file_type_for(args.file),
            mode=args.mode,
            start_date=args.start_date,
            model_client=client,
            work_dir=str(Path(args.file).resolve().parent),
            prefer_ocr=settings.prefer_ocr,
        )
    except (DocumentTextError, ModelResponseError, ModelNotConfiguredError, openai.OpenAIError) as e:
        print(f"[extraction-cli] ❌ {e}", file=sys.stderr)
        return 1

    for w in outcome.warnings:
        print(f"[extraction-cli] ⚠️ {w}", file=sys.stderr)
    print(json.dumps(outcome.parsed.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False))
    return 0


def _cmd_normalize(args: argparse.Namespace) -> int:
    try:
        text, _ = extract_document_text(args.file, _file_type_for(args.file), prefer_ocr=False)
    except DocumentTextError as e:
        print(f"[extraction-cli] ❌ {e}", file=sys.stderr)
        return 1
    print(normalize_weeks(text, args.start_date))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="python -m uniflo.extraction")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_parse = sub.add_parser("parse", help="Parse a syllabus file and print JSON")
    p_parse.add_argument("file", help="PDF, image or markdown syllabus")
    p_parse.add_argument("--start-date", default=None, help="Course start date (YYYY-MM-DD)")
    p_parse.add_argument("--mode", choices=PARSE_MODES, default="regex")

    p_norm = sub.add_parser("normalize", help="Print syllabus text with week references dated")
    p_norm.add_argument("file", help="PDF, image or markdown syllabus")
    p_norm.add_argument("--start-date", required=True, help="Course start date (YYYY-MM-DD)")

    args = parser.parse_args(argv)

    if args.cmd == "parse":
        return _cmd_parse(args)

    if args.cmd == "normalize":
        return _cmd_normalize(args)

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
