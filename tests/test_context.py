import pytest

from conftest import FakeLLMClient
from convrag.errors import CompletionServiceError
from convrag.models import Turn
from convrag.rag.context import (
    ContextSufficiencyClassifier,
    HistoryRelevanceScanner,
    QuestionRefiner,
    is_affirmative,
)


@pytest.mark.parametrize("answer, expected", [
    ("Yes", True),
    ("  yes, it is clear.", True),
    ("YES", True),
    ("No", False),
    ("Maybe yes", False),
    ("", False),
])
def test_is_affirmative(answer, expected):
    assert is_affirmative(answer) is expected


def test_classifier_sends_question_and_reports_sufficiency():
    llm = FakeLLMClient(context=" Yes.\n")

    result = ContextSufficiencyClassifier(llm).classify("What is the capital of France?")

    assert result.sufficient is True
    assert result.answer == "Yes."
    messages = llm.calls_of("context")[0]["messages"]
    assert [m["role"] for m in messages] == ["system", "user"]
    assert 'Question: "What is the capital of France?"' in messages[1]["content"]


def test_classifier_treats_unclear_answer_as_insufficient():
    result = ContextSufficiencyClassifier(FakeLLMClient(context="It depends")).classify("And then?")
    assert result.sufficient is False


def _history(count):
    return [Turn(question=f"q{i}", answer=f"a{i}", epoch_time=i) for i in range(count)]


def test_scanner_examines_at_most_the_bound():
    llm = FakeLLMClient(relevance="No")
    scanner = HistoryRelevanceScanner(llm, max_history_to_check=5)

    assert scanner.find_relevant_turn("why?", _history(7)) is None

    examined = [call["messages"][1]["content"] for call in llm.calls_of("relevance")]
    assert len(examined) == 5
    assert 'Previous Question: "q6"' in examined[0]
    assert 'Previous Question: "q2"' in examined[-1]
    assert not any('"q0"' in text or '"q1"' in text for text in examined)


def test_scanner_returns_most_recent_relevant_turn():
    relevant = {"q3", "q5"}
    llm = FakeLLMClient(
        relevance=lambda content: "Yes" if any(f'Previous Question: "{q}"' in content for q in relevant) else "No"
    )

    turn = HistoryRelevanceScanner(llm).find_relevant_turn("why?", _history(7))

    assert turn.question == "q5"
    assert len(llm.calls_of("relevance")) == 2


def test_scanner_with_empty_history_makes_no_calls():
    llm = FakeLLMClient(relevance="Yes")

    assert HistoryRelevanceScanner(llm).find_relevant_turn("why?", []) is None
    assert llm.calls == []


def test_scanner_renders_missing_answer_as_empty():
    llm = FakeLLMClient(relevance="no")
    HistoryRelevanceScanner(llm).find_relevant_turn("why?", [Turn(question="q", answer=None)])

    assert 'Previous Answer: ""' in llm.calls[0]["messages"][1]["content"]


def test_refiner_returns_trimmed_question():
    llm = FakeLLMClient(refine="  What is the capital of the country mentioned earlier?\n")
    turn = Turn(question="Tell me about France", answer="France is a country in Europe.")

    refined = QuestionRefiner(llm).refine(turn, "What is its capital?")

    assert refined == "What is the capital of the country mentioned earlier?"
    content = llm.calls[0]["messages"][1]["content"]
    assert 'Previous Question: "Tell me about France"' in content
    assert 'Current Question: "What is its capital?"' in content


def test_refiner_rejects_blank_output():
    with pytest.raises(CompletionServiceError):
        QuestionRefiner(FakeLLMClient(refine=" ")).refine(Turn(question="q", answer="a"), "Q")
