from config.settings import COMPLETION_MODEL
from convrag.errors import CompletionServiceError
from convrag.llm.prompts import SUMMARIZE_SYSTEM_PROMPT, SUMMARIZE_TEMPLATE
from convrag.logger import get_logger
from convrag.validation import parse_epoch_key

logger = get_logger(__name__)


def order_prompts(latest_prompts):
    """Prompt texts in ascending numeric epoch order."""
    ordered_keys = sorted(latest_prompts, key=parse_epoch_key)
    return [latest_prompts[key] for key in ordered_keys]


def last_question(latest_prompts):
    """The prompt with the numerically largest epoch key."""
    return latest_prompts[max(latest_prompts, key=parse_epoch_key)]


class QuestionSummarizer:
    """Condense recent prompts into one query, weighted toward the last one."""

    def __init__(self, llm_client, model = COMPLETION_MODEL):
        self.llm_client = llm_client
        self.model = model

    def build_prompt(self, latest_prompts):
        return SUMMARIZE_TEMPLATE.format(questions="\n".join(order_prompts(latest_prompts)))

    def summarize(self, latest_prompts, debug = False):
        summarization_prompt = self.build_prompt(latest_prompts)
        if debug:
            logger.info("Summarization prompt: %s", summarization_prompt)

        summary = self.llm_client.complete(self.model, [
            {"role": "system", "content": SUMMARIZE_SYSTEM_PROMPT},
            {"role": "user", "content": summarization_prompt},
        ])
        if not summary or not summary.strip():
            raise CompletionServiceError("Failed to generate question summary")
        return summary
