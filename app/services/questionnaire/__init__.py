"""
Questionnaire scoring.

The catalog defines categories and weighted questions, the merger applies
partial answer submissions, and the calculator derives completion
percentages from the two.
"""

from app.services.questionnaire.catalog import Catalog, load_catalog
from app.services.questionnaire.merger import AnswerMerger
from app.services.questionnaire.progress import ProgressCalculator

__all__ = [
    "Catalog",
    "load_catalog",
    "AnswerMerger",
    "ProgressCalculator",
]
