from app.models.questionnaire import AnswerMap, CategoryProgress, ProgressReport
from app.services.questionnaire.catalog import Catalog


class ProgressCalculator:
    """
    Weighted questionnaire completion.

    Category % = answered question weight / total question weight * 100.
    Overall %  = sum(category weight * category %) / sum(category weight),
    over categories that have at least one question.

    Pure: the same catalog and answers always produce the same report.
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def compute(self, answers: AnswerMap) -> ProgressReport:
        category_reports = []
        total_answered = 0
        total_questions = 0
        weighted_sum = 0.0
        weight_total = 0.0

        for category in self.catalog.list_categories():
            if not category.has_questions:
                continue

            question_weight = 0.0
            answered_weight = 0.0
            answered_count = 0
            for question in category.questions:
                question_weight += question.weight
                if answers.is_answered(question.id):
                    answered_weight += question.weight
                    answered_count += 1

            percentage = _clamp(100.0 * answered_weight / question_weight) if question_weight > 0 else 0.0
            category_reports.append(
                CategoryProgress(
                    category_id=category.id,
                    category_name=category.name,
                    answered_count=answered_count,
                    total_count=len(category.questions),
                    percentage=percentage,
                )
            )
            total_answered += answered_count
            total_questions += len(category.questions)
            weighted_sum += category.weight * percentage
            weight_total += category.weight

        overall = _clamp(weighted_sum / weight_total) if weight_total > 0 else 0.0
        return ProgressReport(
            categories=tuple(category_reports),
            answered_count=total_answered,
            total_count=total_questions,
            total_percentage=overall,
        )


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))
