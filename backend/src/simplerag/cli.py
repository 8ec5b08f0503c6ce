import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from simplerag.config import load_settings
from simplerag.pipelines import (
    Indexer,
    QueryService,
    create_embedder_from_settings,
    create_llm_from_settings,
    simple_query,
)
from simplerag.stores import get_vector_store

logger = logging.getLogger("simplerag")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT
    )


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.toml in project root)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )


def _query_parser(prog: str, description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument("query_text", nargs="?", help="Question to ask")
    _add_common_arguments(parser)
    return parser


def query_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _query_parser(
        "simplerag-query", "Answer a question from the indexed documents"
    )
    parser.add_argument(
        "--collection", default=None, help="Collection to search (default: configured)"
    )
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if not args.query_text:
        logger.error("Usage: simplerag-query <query_text>")
        return 1

    try:
        settings = load_settings(args.config)
        embedder = create_embedder_from_settings(settings)
        vector_store = get_vector_store(settings, embedder, args.collection)
        service = QueryService.from_settings(settings, vector_store=vector_store)
        service.query_database(args.query_text)
        return 0
    except Exception:
        logger.exception("Query failed")
        return 1


def simple_query_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _query_parser(
        "simplerag-simple-query", "Ask the chat model directly, without retrieval"
    )
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if not args.query_text:
        logger.error("Usage: simplerag-simple-query <query_text>")
        return 1

    try:
        settings = load_settings(args.config)
        simple_query(create_llm_from_settings(settings), args.query_text)
        return 0
    except Exception:
        logger.exception("Query failed")
        return 1


def index_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="simplerag-index",
        description="Index a folder of documents into the vector store",
    )
    parser.add_argument(
        "folder",
        nargs="?",
        type=Path,
        default=None,
        help="Folder to index (default: ingestion.directory from config)",
    )
    parser.add_argument(
        "--collection", default=None, help="Collection to write to (default: configured)"
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Clear the collection before indexing",
    )
    _add_common_arguments(parser)
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.config)
        embedder = create_embedder_from_settings(settings)
        vector_store = get_vector_store(settings, embedder, args.collection)
        indexer = Indexer.from_settings(settings, vector_store=vector_store)

        if args.force:
            indexer.reset()
        indexer.index_folder(args.folder or settings.data_dir)
        return 0
    except Exception:
        logger.exception("Indexing failed")
        return 1


if __name__ == "__main__":
    sys.exit(query_main())
