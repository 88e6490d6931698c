#!/usr/bin/env python3
"""
Word Annotator command line.

Usage:
    word-annotator annotate Haus Katze            # annotate, print JSON
    word-annotator annotate running -l en --store # annotate and persist
    word-annotator init-store                     # create the store schema
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

import structlog
from pydantic import ValidationError

from annotator.core.domain.exceptions import DomainError
from annotator.core.domain.models import DEFAULT_LANGUAGE, AnnotatedWord, WordRequest
from annotator.shared.config import settings
from annotator.shared.container import container
from annotator.shared.logging_config import configure_logging

logger = structlog.get_logger()


async def _annotate(words: List[str], language: str, store: bool) -> List[AnnotatedWord]:
    requests = [WordRequest(word=word, language=language) for word in words]

    if store:
        repository = container.word_repository()
        await repository.initialize()
        return await container.annotate_words_use_case().execute(requests)

    orchestrator = container.annotation_orchestrator()
    return [await orchestrator.annotate(r.word, r.language) for r in requests]


async def _init_store() -> None:
    await container.word_repository().initialize()


def cmd_annotate(args: argparse.Namespace) -> int:
    try:
        results = asyncio.run(_annotate(args.words, args.language, args.store))
    except (DomainError, ValidationError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    payload = [r.model_dump(mode="json", by_alias=True) for r in results]
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


def cmd_init_store(args: argparse.Namespace) -> int:
    try:
        asyncio.run(_init_store())
    except DomainError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    print(f"Word store initialized ({settings.STORAGE_BACKEND.value}).")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="word-annotator", description="Annotate words for speech-therapy exercises.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    annotate = subparsers.add_parser("annotate", help="Annotate one or more words")
    annotate.add_argument("words", nargs="+", help="Words to annotate")
    annotate.add_argument("-l", "--language", default=DEFAULT_LANGUAGE.value, help="ISO 639-1 code (default: de)")
    annotate.add_argument("--store", action="store_true", help="Reuse and persist annotations in the word store")
    annotate.set_defaults(func=cmd_annotate)

    init_store = subparsers.add_parser("init-store", help="Create the word store schema")
    init_store.set_defaults(func=cmd_init_store)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(settings, stream=sys.stderr)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
