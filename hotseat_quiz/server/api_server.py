"""FastAPI host that runs a hot-seat match for a browser on the same machine."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from threading import Lock

from fastapi import Depends, FastAPI, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from hotseat_quiz.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION
from hotseat_quiz.constants.quiz_constants import MAX_PLAYERS
from hotseat_quiz.core.config import MatchConfig
from hotseat_quiz.core.errors import (
    ConfigurationError,
    InvalidStateTransition,
    OutOfRangeAnswer,
    QuizImportError,
)
from hotseat_quiz.core.listeners import InMemoryScoreSink
from hotseat_quiz.core.markdown_renderer import renderer
from hotseat_quiz.core.models import MatchState, Player, Question
from hotseat_quiz.core.services.category_rotation import CategoryRotation
from hotseat_quiz.core.services.web_question_cache import WebQuestionCache
from hotseat_quiz.core.session_controller import SessionController

logger = logging.getLogger(__name__)

_CONSOLE_PAGE_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>HotseatQuiz</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>
      :root { font-family: 'Inter', system-ui, sans-serif; background: #0b1120; color: #f5f7ff; }
      body { margin: 0; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; }
      .card { background: #111a30; border-radius: 0.75rem; padding: 1.5rem; }
      .answers { display: grid; grid-template-columns: repeat(auto-fit, minmax(180px, 1fr)); gap: 0.75rem; }
      .answers button { border: none; border-radius: 0.75rem; padding: 0.85rem; font-size: 1rem; background: #1f9aa5; color: #fff; cursor: pointer; }
      .answers button:disabled { opacity: 0.4; cursor: not-allowed; }
      #timebar { height: 0.4rem; border-radius: 0.2rem; background: #1f9aa5; transition: width 0.25s linear; }
      .hidden { display: none; }
    </style>
  </head>
  <body>
    <div class="card" id="status"></div>
    <div id="timebar"></div>
    <div class="card" id="question"></div>
    <div class="answers" id="answers"></div>
    <button id="continue" class="hidden">Continue</button>
    <script>
      async function post(path, body) {
        await fetch(path, { method: 'POST', headers: { 'Content-Type': 'application/json' }, body: JSON.stringify(body || {}) });
        refresh();
      }
      async function refresh() {
        const state = await (await fetch('/state')).json();
        const status = document.getElementById('status');
        const question = document.getElementById('question');
        const answers = document.getElementById('answers');
        const cont = document.getElementById('continue');
        answers.innerHTML = '';
        cont.classList.toggle('hidden', !state.awaiting_continue);
        if (state.state === 'victory' || state.state === 'game_over') {
          const summary = await (await fetch('/summary')).json();
          status.textContent = summary.result_text;
          question.innerHTML = '';
          return;
        }
        if (!state.question) { status.textContent = 'Start a match with POST /match'; return; }
        document.getElementById('timebar').style.width = `${state.time_fraction * 100}%`;
        status.textContent = `${state.current_player.name} | bonus ${state.available_bonus} | ${state.time_remaining}s`;
        question.innerHTML = state.resolution && state.resolution.followup_text ? state.followup_html : state.question.question_html;
        state.question.answers_html.forEach((html, index) => {
          const button = document.createElement('button');
          button.innerHTML = html;
          button.disabled = state.state !== 'awaiting_answer' || state.disabled_answers.includes(index);
          button.onclick = () => post('/answer', { answer_index: index });
          answers.appendChild(button);
        });
      }
      document.getElementById('continue').onclick = () => post('/continue');
      setInterval(() => post('/tick'), 250);
      refresh();
    </script>
  </body>
</html>
"""


class PlayerPayload(BaseModel):
    """Payload schema for one seat at the device."""

    name: str = Field(min_length=1)
    color: str = "#ffffff"


class MatchPayload(BaseModel):
    """Payload schema for starting a match."""

    players: list[PlayerPayload] = Field(min_length=1, max_length=MAX_PLAYERS)
    settings: MatchConfig = Field(default_factory=MatchConfig)
    category_index: int | None = None
    question_url: str | None = None


class AnswerPayload(BaseModel):
    """Payload schema for submitted answers."""

    answer_index: int


class HotseatHost:
    """Owns the controller and feeds it wall-clock time on every request."""

    def __init__(
        self,
        questions: list[Question] | None = None,
        rotation: CategoryRotation | None = None,
        web_cache: WebQuestionCache | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.lock = Lock()
        self.questions = list(questions or [])
        self.rotation = rotation
        self.web_cache = web_cache or WebQuestionCache()
        self.score_sink = InMemoryScoreSink()
        self.controller = SessionController(score_sink=self.score_sink)
        self._clock = clock
        self._last_tick: float | None = None

    def sync_clock(self) -> None:
        """Tick the controller by the time elapsed since the previous request."""
        now = self._clock()
        if self._last_tick is not None:
            self.controller.tick(max(0.0, now - self._last_tick))
        self._last_tick = now

    def start(self, players: list[Player], questions: list[Question], config: MatchConfig) -> None:
        logger.info(
            "Starting match for %d player(s) with %d question(s)", len(players), len(questions)
        )
        self.controller.start_match(players, questions, config)
        self._last_tick = self._clock()

    def start_category(self, players: list[Player], category_index: int, config: MatchConfig) -> None:
        """Start a match on one category, marking it played only once the match is running."""
        if self.rotation is None:
            raise ConfigurationError("No categories are loaded.")
        category = self.rotation.select(category_index)
        self.start(players, category.questions, config)
        self.rotation.take_current()


def _get_host_dependency(host: HotseatHost):
    def dependency() -> HotseatHost:
        return host

    return dependency


def _state_payload(host: HotseatHost) -> dict[str, object]:
    controller = host.controller
    question = controller.current_question
    player = controller.current_player
    resolution = controller.resolution
    session = controller.session_state
    payload: dict[str, object] = {
        "state": controller.state.value,
        "match_id": controller.match_id or None,
        "question": renderer.render_question(question) if question else None,
        "media": (
            {"kind": question.media.kind, "name": question.media.name}
            if question and question.media
            else None
        ),
        "disabled_answers": sorted(controller.disabled_answers),
        "current_player": (
            {"name": player.name, "color": player.color} if player is not None else None
        ),
        "players": [
            {
                "name": p.name,
                "color": p.color,
                "score": p.display_score,
                "lives": p.lives,
            }
            for p in controller.active_players
        ],
        "available_bonus": math.ceil(controller.available_bonus),
        "time_remaining": round(controller.time_remaining(), 1),
        "time_fraction": round(controller.time_fraction_remaining(), 3),
        "awaiting_continue": controller.awaiting_continue,
        "progress": {
            "questions_asked": session.questions_asked_total,
            "question_limit": controller.question_limit,
            "correct_answers": session.correct_answers_total,
        },
        "resolution": None,
        "followup_html": None,
    }
    if resolution is not None and controller.state is MatchState.RESOLVING:
        payload["resolution"] = {
            "correct": resolution.correct,
            "player_name": resolution.player_name,
            "awarded": math.ceil(resolution.awarded),
            "timed_out": resolution.timed_out,
            "skipped": resolution.skipped,
            "followup_text": resolution.followup_text,
            "correct_answer_indices": list(resolution.correct_answer_indices),
        }
        if resolution.followup_text:
            payload["followup_html"] = renderer.render_fragment(resolution.followup_text)
    return payload


def create_api_app(host: HotseatHost) -> FastAPI:
    """Create a FastAPI application wired to the provided host."""
    app = FastAPI(
        title=f"{APP_NAME} API",
        version=APP_VERSION,
        description=APP_ABOUT_TEXT,
        license_info={"name": APP_LICENSE},
    )
    host_dep = _get_host_dependency(host)

    @app.get("/", response_class=HTMLResponse)
    def serve_console_page() -> str:
        return _CONSOLE_PAGE_HTML

    @app.get("/categories")
    def get_categories(current: HotseatHost = Depends(host_dep)) -> dict[str, object]:
        if current.rotation is None:
            return {"categories": [], "campaign_complete": False}
        return {
            "categories": [
                {"name": c.name, "color": c.color, "icon": c.icon, "already_used": c.already_used}
                for c in current.rotation.get_categories()
            ],
            "campaign_complete": current.rotation.is_campaign_complete(),
        }

    @app.post("/match", status_code=201)
    async def start_match(
        payload: MatchPayload,
        current: HotseatHost = Depends(host_dep),
    ) -> dict[str, object]:
        web_questions: list[Question] | None = None
        if payload.question_url:
            try:
                web_questions = await current.web_cache.get_questions(payload.question_url)
            except QuizImportError as exc:
                raise HTTPException(status_code=502, detail=str(exc)) from exc

        players = [Player(name=p.name.strip(), color=p.color) for p in payload.players]

        def begin() -> dict[str, object]:
            with current.lock:
                try:
                    if web_questions is not None:
                        current.start(players, web_questions, payload.settings)
                    elif payload.category_index is not None:
                        current.start_category(players, payload.category_index, payload.settings)
                    else:
                        current.start(players, current.questions, payload.settings)
                except (ConfigurationError, IndexError, ValueError) as exc:
                    raise HTTPException(status_code=422, detail=str(exc)) from exc
                return _state_payload(current)

        # The host lock is a threading lock; keep it off the event loop.
        return await run_in_threadpool(begin)

    @app.get("/state")
    def get_state(current: HotseatHost = Depends(host_dep)) -> dict[str, object]:
        with current.lock:
            current.sync_clock()
            return _state_payload(current)

    @app.post("/tick")
    def tick(current: HotseatHost = Depends(host_dep)) -> dict[str, object]:
        with current.lock:
            current.sync_clock()
            return _state_payload(current)

    @app.post("/answer")
    def submit_answer(
        payload: AnswerPayload,
        current: HotseatHost = Depends(host_dep),
    ) -> dict[str, object]:
        with current.lock:
            # Expiry is applied first, so a late answer meets a closed window.
            asked_before = current.controller.session_state.questions_asked_total
            current.sync_clock()
            if current.controller.session_state.questions_asked_total != asked_before:
                raise HTTPException(status_code=409, detail="The answer window had already closed.")
            try:
                outcome = current.controller.submit_answer(payload.answer_index)
            except OutOfRangeAnswer as exc:
                raise HTTPException(status_code=422, detail=str(exc)) from exc
            except InvalidStateTransition as exc:
                raise HTTPException(status_code=409, detail=str(exc)) from exc
            result = _state_payload(current)
            result["outcome"] = {
                "correct": outcome.correct,
                "resolved": outcome.resolved,
                "awarded": math.ceil(outcome.awarded),
                "life_lost": outcome.life_lost,
            }
            return result

    @app.post("/continue")
    def continue_match(current: HotseatHost = Depends(host_dep)) -> dict[str, object]:
        with current.lock:
            try:
                current.controller.continue_match()
            except InvalidStateTransition as exc:
                raise HTTPException(status_code=409, detail=str(exc)) from exc
            return _state_payload(current)

    @app.post("/skip")
    def skip_question(current: HotseatHost = Depends(host_dep)) -> dict[str, object]:
        with current.lock:
            current.sync_clock()
            try:
                current.controller.skip_question()
            except InvalidStateTransition as exc:
                raise HTTPException(status_code=409, detail=str(exc)) from exc
            return _state_payload(current)

    @app.get("/summary")
    def get_summary(current: HotseatHost = Depends(host_dep)) -> dict[str, object]:
        with current.lock:
            current.sync_clock()
            try:
                summary = current.controller.summary()
            except InvalidStateTransition as exc:
                raise HTTPException(status_code=409, detail=str(exc)) from exc
            return {
                "match_id": summary.match_id,
                "outcome": summary.outcome.value,
                "result_text": summary.result_text,
                "winner_count": summary.winner_count,
                "correct_answers": summary.correct_answers,
                "questions_asked": summary.questions_asked,
                "question_limit": summary.question_limit,
                "standings": [
                    {
                        "name": s.name,
                        "color": s.color,
                        "score": s.score,
                        "lives": s.lives,
                        "is_winner": s.is_winner,
                    }
                    for s in summary.standings
                ],
                "high_score": math.ceil(current.score_sink.high_score()),
            }

    return app

