import openai
from tenacity import retry, stop_after_attempt, wait_random_exponential, retry_if_exception_type
from config.settings import OPENAI_API_KEY, LLM_MODEL, LLM_MAX_ATTEMPTS
from convrag.errors import CompletionServiceError
from convrag.logger import get_logger

logger = get_logger(__name__)


class LLMClient:
    """Chat completion gateway: model id plus role/content messages in, text out."""

    def __init__(self, client=None):
        if client is None:
            if not OPENAI_API_KEY:
                raise ValueError("OPENAI_API_KEY not set in environment")
            client = openai.OpenAI(api_key=OPENAI_API_KEY)
        self.client = client
        self.model = LLM_MODEL

    @retry(
        wait=wait_random_exponential(min=1, max=60),
        stop=stop_after_attempt(LLM_MAX_ATTEMPTS),
        retry=retry_if_exception_type((openai.RateLimitError, openai.APIConnectionError, openai.APITimeoutError, openai.InternalServerError)),
        reraise=True
    )
    def _chat_completion(self, **kwargs):
        return self.client.chat.completions.create(**kwargs)

    def complete(self, model, messages):
        """
        Run one completion and return the generated text.
        Raises CompletionServiceError when the call fails or yields no text.
        """
        model = model or self.model
        logger.debug("Completion request: model=%s messages=%d", model, len(messages))

        try:
            response = self._chat_completion(
                model=model,
                messages=list(messages)
            )
        except openai.OpenAIError as e:
            raise CompletionServiceError(f"Completion request failed: {e}") from e

        if not response.choices:
            raise CompletionServiceError("Completion returned no choices")

        content = response.choices[0].message.content
        if content is None:
            raise CompletionServiceError("Completion returned no content")

        return content
