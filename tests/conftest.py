import pytest

from convrag.llm.prompts import (
    CONTEXT_CHECK_SYSTEM_PROMPT,
    RELEVANCE_CHECK_SYSTEM_PROMPT,
    REFINE_QUESTION_SYSTEM_PROMPT,
    SUMMARIZE_SYSTEM_PROMPT,
    RAG_SYSTEM_PROMPT,
)
from convrag.storage.sqlite_store import SQLiteStore

PROMPT_KINDS = {
    CONTEXT_CHECK_SYSTEM_PROMPT: "context",
    RELEVANCE_CHECK_SYSTEM_PROMPT: "relevance",
    REFINE_QUESTION_SYSTEM_PROMPT: "refine",
    SUMMARIZE_SYSTEM_PROMPT: "summarize",
    RAG_SYSTEM_PROMPT: "generate",
}


class FakeLLMClient:
    """Records every completion; answers come from a per-kind handler."""

    def __init__(self, **handlers):
        self.handlers = handlers
        self.calls = []

    def complete(self, model, messages):
        kind = PROMPT_KINDS[messages[0]["content"]]
        self.calls.append({"kind": kind, "model": model, "messages": messages})
        handler = self.handlers[kind]
        if isinstance(handler, Exception):
            raise handler
        if callable(handler):
            return handler(messages[1]["content"])
        return handler

    def calls_of(self, kind):
        return [call for call in self.calls if call["kind"] == kind]


class FakeSearchClient:

    def __init__(self, results=None, error=None):
        self.results = results if results is not None else []
        self.error = error
        self.calls = []

    def search(self, service_name, query, columns, limit):
        self.calls.append({
            "service_name": service_name,
            "query": query,
            "columns": columns,
            "limit": limit,
        })
        if self.error is not None:
            raise self.error
        return self.results


@pytest.fixture
def store(tmp_path):
    return SQLiteStore(db_path=str(tmp_path / "test.db"))
