from collections.abc import Mapping
from typing import Any

from loguru import logger

from app.core.errors import InvalidAnswerOption, InvalidAnswerShape, UnknownQuestion
from app.models.questionnaire import (
    ANSWER_TYPES,
    AnswerMap,
    MultipleChoiceAnswer,
    Question,
    QuestionType,
)
from app.services.questionnaire.catalog import Catalog

SCALAR_TYPES = (QuestionType.TEXT, QuestionType.SINGLE_CHOICE, QuestionType.RATING)


class AnswerMerger:
    """
    Applies partial answer submissions onto a stored AnswerMap.

    Last write wins per question; questions missing from the submission keep
    their stored answer. A submission is validated as a whole before anything
    is merged, so a bad entry rejects the entire call.
    """

    def __init__(self, catalog: Catalog, validate_options: bool = False):
        self.catalog = catalog
        self.validate_options = validate_options

    def merge(self, existing: AnswerMap, incoming: Mapping[str, Any]) -> AnswerMap:
        parsed = {qid: self.parse(qid, value) for qid, value in incoming.items()}
        if not parsed:
            return existing
        return AnswerMap(answers={**existing.answers, **parsed})

    def parse(self, question_id: str, value: Any):
        """Turn a raw wire value into the typed answer for ``question_id``."""
        question = self.catalog.get_question(question_id)
        if question is None:
            raise UnknownQuestion(question_id)
        answer = self._coerce(question, value)
        if self.validate_options:
            self._check_options(question, answer.raw())
        return answer

    def load(self, raw: Mapping[str, Any] | None) -> AnswerMap:
        """
        Rebuild an AnswerMap from its stored form.

        Entries for questions no longer in the catalog, or whose stored shape no
        longer matches the question type, are dropped with a warning.
        """
        answers = {}
        for question_id, value in (raw or {}).items():
            if value is None:
                continue
            question = self.catalog.get_question(question_id)
            if question is None:
                logger.warning(f"Dropping stored answer for unknown question '{question_id}'")
                continue
            try:
                answers[question_id] = self._coerce(question, value)
            except InvalidAnswerShape as exc:
                logger.warning(f"Dropping stored answer: {exc.message}")
        return AnswerMap(answers=answers)

    @staticmethod
    def _coerce(question: Question, value: Any):
        if question.type in SCALAR_TYPES:
            if not isinstance(value, str):
                raise InvalidAnswerShape(question.id, f"{question.type.value} expects a string")
            return ANSWER_TYPES[question.type](value=value)
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise InvalidAnswerShape(question.id, "MULTIPLE_CHOICE expects a list of strings")
        return MultipleChoiceAnswer(value=tuple(value))

    @staticmethod
    def _check_options(question: Question, raw: str | list[str]) -> None:
        if question.type == QuestionType.TEXT or not question.options:
            return
        # Blank answers clear a question and are always allowed
        chosen = raw if isinstance(raw, list) else [raw] if raw.strip() else []
        unknown = [v for v in chosen if v not in question.options]
        if unknown:
            raise InvalidAnswerOption(question.id, f"not among the declared options: {unknown}")
