import json

from config.settings import COMPLETION_MODEL
from convrag.errors import CompletionServiceError
from convrag.llm.prompts import RAG_ANSWER_TEMPLATE, RAG_SYSTEM_PROMPT
from convrag.logger import get_logger

logger = get_logger(__name__)


class ResponseGenerator:
    """Final answer grounded in the question summary and search results."""

    def __init__(self, llm_client, model = COMPLETION_MODEL):
        self.llm_client = llm_client
        self.model = model

    def _create_prompt_with_context(self, summary, results, question):
        return RAG_ANSWER_TEMPLATE.format(
            context=summary,
            results=json.dumps(results, indent=2, default=str),
            question=question
        )

    def generate(self, summary, results, question, debug = False):
        response_prompt = self._create_prompt_with_context(summary, results, question)
        if debug:
            logger.info("Response generation prompt: %s", response_prompt)

        response = self.llm_client.complete(self.model, [
            {"role": "system", "content": RAG_SYSTEM_PROMPT},
            {"role": "user", "content": response_prompt},
        ])
        if not response or not response.strip():
            raise CompletionServiceError("Failed to generate response")
        return response
