"""Building blocks of the refine-question pipeline.

A question is first checked for self-containment. If it needs context, the
most recent turns are scanned backward, one relevance completion per turn,
and the first relevant turn is used to rewrite the question.
"""

from itertools import islice

from config.settings import COMPLETION_MODEL, MAX_HISTORY_TO_CHECK
from convrag.errors import CompletionServiceError
from convrag.llm.prompts import (
    CONTEXT_CHECK_SYSTEM_PROMPT,
    CONTEXT_CHECK_TEMPLATE,
    RELEVANCE_CHECK_SYSTEM_PROMPT,
    RELEVANCE_CHECK_TEMPLATE,
    REFINE_QUESTION_SYSTEM_PROMPT,
    REFINE_QUESTION_TEMPLATE,
)
from convrag.logger import get_logger
from convrag.models import ClassificationResult

logger = get_logger(__name__)


def is_affirmative(answer):
    """Anything that does not start with "yes" counts as a no."""
    return (answer or "").strip().lower().startswith("yes")


def _answer_text(turn):
    return turn.answer if turn.answer is not None else ""


class ContextSufficiencyClassifier:

    def __init__(self, llm_client, model = COMPLETION_MODEL):
        self.llm_client = llm_client
        self.model = model

    def classify(self, question):
        messages = [
            {"role": "system", "content": CONTEXT_CHECK_SYSTEM_PROMPT},
            {"role": "user", "content": CONTEXT_CHECK_TEMPLATE.format(question=question)},
        ]
        answer = self.llm_client.complete(self.model, messages).strip()
        return ClassificationResult(sufficient=is_affirmative(answer), answer=answer)


class HistoryRelevanceScanner:

    def __init__(self, llm_client, model = COMPLETION_MODEL, max_history_to_check = MAX_HISTORY_TO_CHECK):
        self.llm_client = llm_client
        self.model = model
        self.max_history_to_check = max_history_to_check

    def is_relevant(self, question, turn):
        messages = [
            {"role": "system", "content": RELEVANCE_CHECK_SYSTEM_PROMPT},
            {"role": "user", "content": RELEVANCE_CHECK_TEMPLATE.format(
                question=question,
                previous_question=turn.question,
                previous_answer=_answer_text(turn),
            )},
        ]
        return is_affirmative(self.llm_client.complete(self.model, messages))

    def find_relevant_turn(self, question, history):
        """
        Return the most recent relevant turn within the scan bound, or None.
        First match wins; older turns are not examined once one is found.
        """
        recent = islice(reversed(history), max(self.max_history_to_check, 0))
        for checked, turn in enumerate(recent, 1):
            if self.is_relevant(question, turn):
                logger.debug("Turn %d back is relevant", checked)
                return turn
        return None


class QuestionRefiner:

    def __init__(self, llm_client, model = COMPLETION_MODEL):
        self.llm_client = llm_client
        self.model = model

    def refine(self, turn, question):
        messages = [
            {"role": "system", "content": REFINE_QUESTION_SYSTEM_PROMPT},
            {"role": "user", "content": REFINE_QUESTION_TEMPLATE.format(
                previous_question=turn.question,
                previous_answer=_answer_text(turn),
                question=question,
            )},
        ]
        refined = self.llm_client.complete(self.model, messages).strip()
        if not refined:
            raise CompletionServiceError("Failed to generate refined question")
        return refined
