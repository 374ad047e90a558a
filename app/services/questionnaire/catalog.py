import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from app.core.errors import CatalogConfigurationError, CategoryNotFound
from app.models.questionnaire import Category, Question
from app.services.questionnaire.definitions import DEFAULT_CATALOG


class Catalog:
    """
    Immutable set of questionnaire categories and their questions.

    Built once at startup and handed to whatever needs it. Nothing mutates it
    afterwards, so it is safe to share between concurrent requests.
    """

    def __init__(self, categories: Iterable[Category]):
        self._categories: tuple[Category, ...] = tuple(categories)
        self._by_id: dict[str, Category] = {}
        self._questions: dict[str, Question] = {}
        self._validate()

    def _validate(self) -> None:
        for category in self._categories:
            if category.id in self._by_id:
                raise CatalogConfigurationError(f"Duplicate category id '{category.id}'")
            if category.weight <= 0:
                raise CatalogConfigurationError(f"Category '{category.id}' has non-positive weight {category.weight}")
            self._by_id[category.id] = category

        for category in self._categories:
            for question in category.questions:
                if question.id in self._questions:
                    raise CatalogConfigurationError(f"Duplicate question id '{question.id}'")
                if question.category_id not in self._by_id:
                    raise CatalogConfigurationError(
                        f"Question '{question.id}' references unknown category '{question.category_id}'"
                    )
                if question.category_id != category.id:
                    raise CatalogConfigurationError(
                        f"Question '{question.id}' is listed under '{category.id}' "
                        f"but references category '{question.category_id}'"
                    )
                if question.weight <= 0:
                    raise CatalogConfigurationError(
                        f"Question '{question.id}' has non-positive weight {question.weight}"
                    )
                self._questions[question.id] = question

    @classmethod
    def from_definitions(cls, definitions: list[dict[str, Any]]) -> "Catalog":
        """
        Build a catalog from plain category dicts.

        Questions may omit ``categoryId``/``categoryName``; they default to the
        owning category. Any malformed entry raises ``CatalogConfigurationError``.
        """
        categories = []
        try:
            for raw_category in definitions:
                raw_questions = raw_category.get("questions") or []
                category_id = raw_category.get("id")
                category_name = raw_category.get("name")
                questions = [
                    Question.model_validate(
                        {"categoryId": category_id, "categoryName": category_name, **raw_question}
                    )
                    for raw_question in raw_questions
                ]
                categories.append(Category.model_validate({**raw_category, "questions": questions}))
        except ValidationError as exc:
            raise CatalogConfigurationError(f"Invalid catalog definition: {exc}") from exc
        except (TypeError, AttributeError) as exc:
            raise CatalogConfigurationError(f"Malformed catalog definition: {exc}") from exc
        return cls(categories)

    @classmethod
    def from_file(cls, path: str | Path) -> "Catalog":
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise CatalogConfigurationError(f"Cannot read catalog file '{path}': {exc}") from exc
        if isinstance(data, dict):
            data = data.get("categories")
        if not isinstance(data, list):
            raise CatalogConfigurationError(f"Catalog file '{path}' must contain a list of categories")
        return cls.from_definitions(data)

    @classmethod
    def default(cls) -> "Catalog":
        return cls.from_definitions(DEFAULT_CATALOG)

    def list_categories(self) -> tuple[Category, ...]:
        return self._categories

    def get_category(self, category_id: str) -> Category:
        category = self._by_id.get(category_id)
        if category is None:
            raise CategoryNotFound(category_id)
        return category

    def get_question(self, question_id: str) -> Question | None:
        return self._questions.get(question_id)

    def questions(self) -> tuple[Question, ...]:
        return tuple(self._questions.values())

    def total_weight(self) -> float:
        """Sum of category weights, counting only categories that have questions."""
        return sum(c.weight for c in self._categories if c.has_questions)

    def __len__(self) -> int:
        return len(self._categories)


def load_catalog(path: str | None = None) -> Catalog:
    """Load the catalog from ``path`` when given, otherwise the built-in definition."""
    if path:
        logger.info(f"Loading questionnaire catalog from {path}")
        catalog = Catalog.from_file(path)
    else:
        catalog = Catalog.default()
    logger.info(f"Questionnaire catalog loaded: {len(catalog)} categories, {len(catalog.questions())} questions")
    return catalog
