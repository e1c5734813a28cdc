"""Application entry point for the HotseatQuiz host."""

from __future__ import annotations

import argparse
from pathlib import Path

import uvicorn

from hotseat_quiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from hotseat_quiz.core.errors import QuizImportError
from hotseat_quiz.core.quiz_importer import load_quiz_from_file, parse_xml_categories
from hotseat_quiz.core.services.category_rotation import CategoryRotation
from hotseat_quiz.server.api_server import HotseatHost, create_api_app
from hotseat_quiz.utils.logging_config import configure_logging


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a hot-seat quiz in the browser.")
    parser.add_argument("quiz_file", type=Path, help="Quiz file (.txt or .xml)")
    parser.add_argument(
        "--categories",
        type=Path,
        default=None,
        help="XML file with <category> elements for the category wheel",
    )
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Load the quiz, build the host and serve it until interrupted."""
    args = _parse_args(argv)
    logger = configure_logging()

    try:
        imported = load_quiz_from_file(args.quiz_file)
        rotation = None
        if args.categories is not None:
            categories = parse_xml_categories(args.categories.read_text(encoding="utf-8"))
            rotation = CategoryRotation(categories)
    except (OSError, QuizImportError) as exc:
        logger.error("Could not load questions: %s", exc)
        raise SystemExit(1) from exc

    logger.info("Loaded %d question(s) from %s", len(imported.questions), imported.source_path)
    host = HotseatHost(questions=imported.questions, rotation=rotation)
    logger.info("Quiz console available at http://%s:%d/", args.host, args.port)
    uvicorn.run(create_api_app(host), host=args.host, port=args.port, log_level="info")


if __name__ == "__main__":
    main()
