from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import ConfigDict, Field

from app.core.constants import DEFAULT_CATEGORY_WEIGHT, DEFAULT_QUESTION_WEIGHT
from app.models.base import CamelModel


class QuestionType(str, Enum):
    TEXT = "TEXT"
    SINGLE_CHOICE = "SINGLE_CHOICE"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    RATING = "RATING"


class Question(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    type: QuestionType
    options: tuple[str, ...] | None = None
    category_id: str
    category_name: str
    weight: float = Field(default=DEFAULT_QUESTION_WEIGHT, gt=0)


class Category(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    weight: float = Field(default=DEFAULT_CATEGORY_WEIGHT, gt=0)
    image_url: str | None = None
    questions: tuple[Question, ...] = ()

    @property
    def has_questions(self) -> bool:
        return bool(self.questions)


# Answers are a tagged variant over the four question kinds. The tag is the
# question type, so an answer can never be stored against the wrong kind.


class _ScalarAnswer(CamelModel):
    model_config = ConfigDict(frozen=True)

    value: str

    def is_answered(self) -> bool:
        return bool(self.value.strip())

    def raw(self) -> str:
        return self.value


class TextAnswer(_ScalarAnswer):
    type: Literal[QuestionType.TEXT] = QuestionType.TEXT


class SingleChoiceAnswer(_ScalarAnswer):
    type: Literal[QuestionType.SINGLE_CHOICE] = QuestionType.SINGLE_CHOICE


class RatingAnswer(_ScalarAnswer):
    type: Literal[QuestionType.RATING] = QuestionType.RATING


class MultipleChoiceAnswer(CamelModel):
    model_config = ConfigDict(frozen=True)

    type: Literal[QuestionType.MULTIPLE_CHOICE] = QuestionType.MULTIPLE_CHOICE
    value: tuple[str, ...]

    def is_answered(self) -> bool:
        return len(self.value) > 0

    def raw(self) -> list[str]:
        return list(self.value)


Answer = Annotated[
    Union[TextAnswer, SingleChoiceAnswer, RatingAnswer, MultipleChoiceAnswer],
    Field(discriminator="type"),
]

ANSWER_TYPES: dict[QuestionType, type] = {
    QuestionType.TEXT: TextAnswer,
    QuestionType.SINGLE_CHOICE: SingleChoiceAnswer,
    QuestionType.RATING: RatingAnswer,
    QuestionType.MULTIPLE_CHOICE: MultipleChoiceAnswer,
}

RawAnswer = str | list[str]


class AnswerMap(CamelModel):
    """A user's answers keyed by question id. Never mutated in place."""

    model_config = ConfigDict(frozen=True)

    answers: dict[str, Answer] = Field(default_factory=dict)

    def __contains__(self, question_id: str) -> bool:
        return question_id in self.answers

    def __len__(self) -> int:
        return len(self.answers)

    def get(self, question_id: str) -> Any | None:
        return self.answers.get(question_id)

    def is_answered(self, question_id: str) -> bool:
        answer = self.answers.get(question_id)
        return answer is not None and answer.is_answered()

    def to_raw(self) -> dict[str, RawAnswer]:
        """Plain ``question id -> str | list[str]`` mapping used for storage and responses."""
        return {qid: answer.raw() for qid, answer in self.answers.items()}


class CategoryProgress(CamelModel):
    model_config = ConfigDict(frozen=True)

    category_id: str
    category_name: str
    answered_count: int
    total_count: int
    percentage: float


class ProgressReport(CamelModel):
    model_config = ConfigDict(frozen=True)

    categories: tuple[CategoryProgress, ...] = ()
    answered_count: int = 0
    total_count: int = 0
    total_percentage: float = 0.0

    def category_percentages(self) -> dict[str, float]:
        return {c.category_id: c.percentage for c in self.categories}


class QuestionWithAnswer(CamelModel):
    id: str
    title: str
    description: str
    type: QuestionType
    options: list[str] | None = None
    category_id: str
    category_name: str
    weight: float
    # Unanswered questions serialize as an explicit null
    answer: RawAnswer | None = None


class CategoryWithAnswers(CamelModel):
    id: str
    name: str
    description: str
    weight: float
    image_url: str | None = None
    questions: list[QuestionWithAnswer] = Field(default_factory=list)


class CategoryAnswersResponse(CamelModel):
    category: Category
    answers: dict[str, RawAnswer] = Field(default_factory=dict)


class QuestionnaireAnswersRequest(CamelModel):
    answers: dict[str, Any] = Field(default_factory=dict)


class QuestionnaireAnswersResponse(CamelModel):
    user_id: str
    answers: dict[str, RawAnswer] = Field(default_factory=dict)
