"""Markdown rendering for question, answer and follow-up text.

Question files are authored as light markdown (emphasis, inline code, line
breaks). The host renders them to HTML fragments once per request; the engine
itself only ever sees the raw text.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt

from hotseat_quiz.core.models import Question


@dataclass(slots=True)
class MarkdownRenderer:
    """Converts question markdown into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html, "breaks": True})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""

        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def render_inline(self, markdown_text: str) -> str:
        """Render a single answer label without the wrapping paragraph."""

        return self._markdown.renderInline(markdown_text.strip())

    def render_question(self, question: Question) -> dict[str, object]:
        return {
            "question_html": self.render_fragment(question.text),
            "answers_html": [self.render_inline(answer.text) for answer in question.answers],
        }


renderer = MarkdownRenderer()
# Shared instance; MarkdownIt is safe for concurrent read-only renders.
