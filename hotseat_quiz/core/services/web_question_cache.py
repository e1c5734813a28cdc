"""Load-once cache for question lists fetched from a web address."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

import aiohttp

from hotseat_quiz.constants.quiz_constants import WEB_LOAD_TIMEOUT_SECONDS
from hotseat_quiz.core.errors import QuizImportError
from hotseat_quiz.core.models import Question
from hotseat_quiz.core.quiz_importer import parse_xml_questions

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[str]]


async def fetch_quiz_document(url: str, timeout_seconds: float = WEB_LOAD_TIMEOUT_SECONDS) -> str:
    """Download a quiz XML document, reporting failures as :class:`QuizImportError`."""
    timeout = aiohttp.ClientTimeout(total=timeout_seconds)
    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url) as response:
                if response.status == 404:
                    raise QuizImportError("Question list can't be found (404)")
                if response.status >= 400:
                    raise QuizImportError(f"Question list request failed ({response.status})")
                return await response.text()
    except aiohttp.ClientConnectionError as exc:
        logger.error("Network error loading questions from %s: %s", url, exc)
        raise QuizImportError("Internet connection problem") from exc
    except asyncio.TimeoutError as exc:
        raise QuizImportError(f"Question list did not load within {timeout_seconds:g}s") from exc
    except aiohttp.ClientError as exc:
        raise QuizImportError(f"Question list can't be loaded: {exc}") from exc


class WebQuestionCache:
    """Questions fetched from the web, populated at most once per address.

    Entries are never invalidated; the cache lives as long as the process.
    Callers receive copies, so one match cannot reorder another's questions.
    """

    def __init__(self, fetcher: Fetcher | None = None) -> None:
        self._fetcher = fetcher or fetch_quiz_document
        self._entries: dict[str, list[Question]] = {}
        self._lock = asyncio.Lock()

    def is_loaded(self, url: str) -> bool:
        return url in self._entries

    async def get_questions(self, url: str) -> list[Question]:
        cached = self._entries.get(url)
        if cached is None:
            async with self._lock:
                cached = self._entries.get(url)
                if cached is None:
                    logger.info("Loading questions from %s", url)
                    document = await self._fetcher(url)
                    cached = parse_xml_questions(document)
                    self._entries[url] = cached
        return [question.copy() for question in cached]
