import json

import pytest

from conftest import FakeLLMClient
from convrag.errors import CompletionServiceError
from convrag.rag.generator import ResponseGenerator


def test_generator_embeds_summary_results_and_question():
    llm = FakeLLMClient(generate="final answer")
    results = [{"transcript_text": "Inflation is...", "region": "EU"}]

    answer = ResponseGenerator(llm).generate("summary", results, "How does it affect the economy?")

    assert answer == "final answer"
    prompt = llm.calls_of("generate")[0]["messages"][1]["content"]
    assert "Context: summary" in prompt
    assert json.dumps(results, indent=2) in prompt
    assert "User Question: How does it affect the economy?" in prompt


def test_generator_propagates_gateway_failure():
    llm = FakeLLMClient(generate=CompletionServiceError("Completion returned no choices"))

    with pytest.raises(CompletionServiceError):
        ResponseGenerator(llm).generate("summary", [], "Q")
