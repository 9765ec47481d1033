import openai
from tenacity import retry, stop_after_attempt, wait_random_exponential, retry_if_exception_type
from config.settings import OPENAI_API_KEY, EMBEDDING_MODEL, LLM_MAX_ATTEMPTS


class EmbeddingGenerator:
    """Generate query embeddings using OpenAI."""

    def __init__(self, client=None):
        if client is None:
            if not OPENAI_API_KEY:
                raise ValueError("OPENAI_API_KEY not set in environment")
            client = openai.OpenAI(api_key=OPENAI_API_KEY)
        self.client = client
        self.model = EMBEDDING_MODEL

    @retry(
        wait=wait_random_exponential(min=1, max=60),
        stop=stop_after_attempt(LLM_MAX_ATTEMPTS),
        retry=retry_if_exception_type((openai.RateLimitError, openai.APIConnectionError, openai.APITimeoutError, openai.InternalServerError)),
        reraise=True
    )
    def _create_embedding(self, **kwargs):
        return self.client.embeddings.create(**kwargs)

    def generate_embedding(self, text):
        try:
            response = self._create_embedding(
                model=self.model,
                input=text
            )
            return response.data[0].embedding
        except openai.OpenAIError as e:
            raise ValueError(f"Error generating embedding: {str(e)}") from e
