"""Utilities for importing questions from quiz files.

Two formats are understood.

Plain text (repeat blocks separated by blank lines or '---'):

    Q: Question text. Additional lines until the next marker are treated as
       part of the question.
    A: First option text
    B: Second option text
    C: Third option text          (A-F, at least one option)
    CORRECT: B                    (one or more letters, e.g. "A, C")
    BONUS: 100                    (optional, default 0)
    TIMELIMIT: 15                 (optional, seconds)
    FOLLOWUP: Shown after the question is resolved (optional)
    IMAGE: name | VIDEO: name     (optional)

XML, one ``record`` element per question:

    <quiz>
      <record>
        <Question>What is 2 + 2?</Question>
        <Followup>Basic arithmetic.</Followup>
        <Bonus>100</Bonus>
        <Time>15</Time>
        <Image>numbers</Image>
        <Answers>
          <Answer isCorrect="false">3</Answer>
          <Answer isCorrect="true">4</Answer>
        </Answers>
      </record>
    </quiz>

Categories use the same XML wrapped in ``<category name=".." color="..">``
elements.
"""

from __future__ import annotations

import xml.etree.ElementTree as ElementTree
from dataclasses import dataclass
from pathlib import Path

from hotseat_quiz.constants.quiz_constants import DEFAULT_TIME_LIMIT_SECONDS
from hotseat_quiz.core.errors import QuizImportError
from hotseat_quiz.core.models import Answer, Category, MediaRef, Question


@dataclass(slots=True)
class ImportedQuiz:
    """Container for imported quiz metadata and questions."""

    source_path: Path
    questions: list[Question]


_OPTION_ORDER = ["A", "B", "C", "D", "E", "F"]


def load_quiz_from_file(file_path: Path) -> ImportedQuiz:
    text = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() == ".xml":
        questions = parse_xml_questions(text)
    else:
        questions = _parse_quiz_text(text)
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")
    return ImportedQuiz(source_path=file_path, questions=questions)


def parse_xml_questions(document: str) -> list[Question]:
    """Parse every ``record`` element of an XML document."""
    root = _parse_xml(document)
    return [_parse_record(record) for record in root.iter("record")]


def parse_xml_categories(document: str) -> list[Category]:
    root = _parse_xml(document)
    categories: list[Category] = []
    for element in root.iter("category"):
        name = (element.get("name") or "").strip()
        if not name:
            raise QuizImportError("Every category needs a name attribute.")
        categories.append(
            Category(
                name=name,
                color=element.get("color", "#ffffff"),
                icon=element.get("icon"),
                questions=[_parse_record(record) for record in element.iter("record")],
            )
        )
    return categories


def _parse_xml(document: str) -> ElementTree.Element:
    try:
        return ElementTree.fromstring(document)
    except ElementTree.ParseError as exc:
        raise QuizImportError(f"Quiz XML is malformed: {exc}") from exc


def _parse_record(record: ElementTree.Element) -> Question:
    text = ""
    followup: str | None = None
    bonus: float = 0
    time_limit: float = DEFAULT_TIME_LIMIT_SECONDS
    media: MediaRef | None = None
    answers: list[Answer] = []

    for child in record:
        content = (child.text or "").strip()
        if child.tag == "Question":
            text = content
        elif child.tag == "Followup":
            followup = content or None
        elif child.tag == "Bonus":
            bonus = _parse_number(content, "Bonus")
        elif child.tag == "Time":
            time_limit = _parse_number(content, "Time")
        elif child.tag in ("Image", "Video") and content:
            media = MediaRef(kind=child.tag.lower(), name=content)
        elif child.tag == "Answers":
            answers = [_parse_xml_answer(node) for node in child if node.tag == "Answer"]

    return _build_question(text, answers, bonus, time_limit, followup, media)


def _parse_xml_answer(node: ElementTree.Element) -> Answer:
    raw_flag = node.get("isCorrect", node.get("correct"))
    if raw_flag is None and node.attrib:
        raw_flag = next(iter(node.attrib.values()))
    flag = (raw_flag or "false").strip().lower()
    if flag not in ("true", "false"):
        raise QuizImportError(f"Answer correctness must be true or false, got '{raw_flag}'.")
    return Answer(text=(node.text or "").strip(), is_correct=flag == "true")


def _parse_quiz_text(text: str) -> list[Question]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            # Blank line encountered after content - finalize current block
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    return [_parse_block(block) for block in blocks if block]


def _parse_block(block: str) -> Question:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letters: list[str] = []
    bonus: float = 0
    time_limit: float = DEFAULT_TIME_LIMIT_SECONDS
    followup: str | None = None
    media: MediaRef | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        key, _, value = line.partition(":")
        key = key.strip().upper()
        value = value.strip()

        if upper.startswith("Q:"):
            question_lines = [value]
            current_section = "Q"
        elif key == "CORRECT":
            correct_letters = [part.strip().upper() for part in value.split(",") if part.strip()]
            current_section = None
        elif key == "BONUS":
            bonus = _parse_number(value, "BONUS")
            current_section = None
        elif key == "TIMELIMIT":
            time_limit = _parse_number(value, "TIMELIMIT")
            current_section = None
        elif key == "FOLLOWUP":
            followup = value or None
            current_section = "FOLLOWUP"
        elif key in ("IMAGE", "VIDEO"):
            media = MediaRef(kind=key.lower(), name=value) if value else None
            current_section = None
        elif len(line) > 2 and line[0].upper() in _OPTION_ORDER and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
        elif current_section == "Q":
            question_lines.append(line)
        elif current_section == "FOLLOWUP":
            followup = f"{followup}\n{line}" if followup else line
        elif current_section in _OPTION_ORDER:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    if not question_lines:
        raise QuizImportError("Question text missing (Q: ...)")
    if not options:
        raise QuizImportError("Each question must define at least one option (A-F).")

    letters = [letter for letter in _OPTION_ORDER if letter in options]
    for letter in correct_letters:
        if letter not in letters:
            raise QuizImportError(f"CORRECT refers to undefined option '{letter}'.")
    answers = [
        Answer(text=options[letter].strip(), is_correct=letter in correct_letters)
        for letter in letters
    ]
    question_text = "\n".join(question_lines).strip()
    return _build_question(question_text, answers, bonus, time_limit, followup, media)


def _build_question(
    text: str,
    answers: list[Answer],
    bonus: float,
    time_limit: float,
    followup: str | None,
    media: MediaRef | None,
) -> Question:
    if not text:
        raise QuizImportError("Question text cannot be empty.")
    if not answers:
        raise QuizImportError(f"Question '{text}' has no answers.")
    if any(not answer.text for answer in answers):
        raise QuizImportError(f"Question '{text}' has an empty answer.")
    if not any(answer.is_correct for answer in answers):
        raise QuizImportError(f"Question '{text}' has no correct answer.")
    return Question(
        text=text,
        answers=answers,
        bonus=bonus,
        time_limit_seconds=time_limit,
        followup_text=followup,
        media=media,
    )


def _parse_number(raw_value: str, field_name: str) -> float:
    if not raw_value:
        raise QuizImportError(f"{field_name} must include a numeric value.")
    try:
        parsed_value = float(raw_value)
    except ValueError as exc:
        raise QuizImportError(f"{field_name} must be a number, got '{raw_value}'.") from exc
    if parsed_value < 0:
        raise QuizImportError(f"{field_name} must not be negative.")
    return int(parsed_value) if parsed_value.is_integer() else parsed_value
