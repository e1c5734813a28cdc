from __future__ import annotations

import asyncio

import pytest

from hotseat_quiz.core.errors import QuizImportError
from hotseat_quiz.core.services.web_question_cache import WebQuestionCache

DOCUMENT = """<quiz>
  <record>
    <Question>Capital of France?</Question>
    <Bonus>10</Bonus>
    <Answers>
      <Answer isCorrect="true">Paris</Answer>
      <Answer isCorrect="false">Lyon</Answer>
    </Answers>
  </record>
</quiz>"""

URL = "https://example.com/questions.xml"


class FakeFetcher:
    def __init__(self, document: str = DOCUMENT, error: Exception | None = None) -> None:
        self.document = document
        self.error = error
        self.calls: list[str] = []

    async def __call__(self, url: str) -> str:
        self.calls.append(url)
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.document


def test_questions_are_fetched_once_per_address():
    fetcher = FakeFetcher()
    cache = WebQuestionCache(fetcher=fetcher)

    async def scenario():
        first = await cache.get_questions(URL)
        second = await cache.get_questions(URL)
        return first, second

    first, second = asyncio.run(scenario())

    assert fetcher.calls == [URL]
    assert cache.is_loaded(URL)
    assert [q.text for q in first] == ["Capital of France?"]
    assert [q.text for q in second] == ["Capital of France?"]


def test_concurrent_requests_share_one_fetch():
    fetcher = FakeFetcher()
    cache = WebQuestionCache(fetcher=fetcher)

    async def scenario():
        return await asyncio.gather(*(cache.get_questions(URL) for _ in range(5)))

    results = asyncio.run(scenario())

    assert fetcher.calls == [URL]
    assert all(len(result) == 1 for result in results)


def test_callers_get_independent_copies():
    cache = WebQuestionCache(fetcher=FakeFetcher())

    async def scenario():
        first = await cache.get_questions(URL)
        first[0].answers.reverse()
        return await cache.get_questions(URL)

    second = asyncio.run(scenario())

    assert second[0].answers[0].text == "Paris"


def test_failed_fetch_is_not_cached():
    fetcher = FakeFetcher(error=QuizImportError("Internet connection problem"))
    cache = WebQuestionCache(fetcher=fetcher)

    with pytest.raises(QuizImportError):
        asyncio.run(cache.get_questions(URL))
    assert not cache.is_loaded(URL)

    fetcher.error = None
    assert len(asyncio.run(cache.get_questions(URL))) == 1
    assert len(fetcher.calls) == 2
