import pytest

from convrag.errors import ValidationError
from convrag.validation import parse_conversation, parse_rag_request


def _prompts(count):
    return {str(1000 + i): f"question {i}" for i in range(count)}


def test_parse_rag_request_builds_typed_request():
    request = parse_rag_request({
        "service_id": "7",
        "latest_prompts": {"1": "What is inflation?"},
        "debug": True,
    })

    assert request.service_id == 7
    assert request.domain_name is None
    assert request.latest_prompts == {"1": "What is inflation?"}
    assert request.debug is True


def test_parse_rag_request_accepts_camel_case_and_domain():
    request = parse_rag_request({
        "domainName": " finance ",
        "latestPrompts": {1699000000: "Q"},
    })

    assert request.service_id is None
    assert request.domain_name == "finance"
    assert request.latest_prompts == {"1699000000": "Q"}
    assert request.debug is False


@pytest.mark.parametrize("params, rule", [
    (None, "non-null object"),
    ("service_id=1", "non-null object"),
    ({"latest_prompts": {"1": "Q"}}, "service_id or domain_name"),
    ({"service_id": 1}, "latest_prompts"),
    ({"service_id": 0, "latest_prompts": {"1": "Q"}}, "positive integer"),
    ({"service_id": -3, "latest_prompts": {"1": "Q"}}, "positive integer"),
    ({"service_id": True, "latest_prompts": {"1": "Q"}}, "positive integer"),
    ({"service_id": "abc", "latest_prompts": {"1": "Q"}}, "positive integer"),
    ({"service_id": 1.5, "latest_prompts": {"1": "Q"}}, "positive integer"),
    ({"domain_name": "  ", "latest_prompts": {"1": "Q"}}, "domain_name"),
    ({"service_id": 1, "latest_prompts": None}, "non-null object"),
    ({"service_id": 1, "latest_prompts": {}}, "at least one prompt"),
    ({"service_id": 1, "latest_prompts": _prompts(21)}, "more than 20"),
    ({"service_id": 1, "latest_prompts": {"abc": "Q"}}, "Invalid epoch timestamp key: abc"),
    ({"service_id": 1, "latest_prompts": {"-5": "Q"}}, "Invalid epoch timestamp key: -5"),
    ({"service_id": 1, "latest_prompts": {"0": "Q"}}, "Invalid epoch timestamp key: 0"),
    ({"service_id": 1, "latest_prompts": {"1": "   "}}, "Prompt for epoch 1"),
    ({"service_id": 1, "latest_prompts": {"1": 42}}, "Prompt for epoch 1"),
    ({"service_id": 1, "latest_prompts": {"1": "Q"}, "debug": "yes"}, "debug flag"),
])
def test_parse_rag_request_rejects_malformed_input(params, rule):
    with pytest.raises(ValidationError, match=rule):
        parse_rag_request(params)


def test_parse_rag_request_accepts_twenty_prompts():
    request = parse_rag_request({"service_id": 1, "latest_prompts": _prompts(20)})
    assert len(request.latest_prompts) == 20


def test_parse_conversation_orders_history_by_epoch():
    conversation = parse_conversation({
        "conversation_id": "CONV_2023_003",
        "conversationHistory": [
            {"epochTime": 1699000180, "question": "How do we automate the measurements?", "answer": "Use a script."},
            {"epochTime": 1699000000, "question": "What's the sampling plan?", "answer": "Nine dies per wafer."},
        ],
        "currentQuestion": {"epochTime": 1699000360, "question": "How should we handle errors?", "answer": None},
    })

    assert conversation.conversation_id == "CONV_2023_003"
    assert [turn.epoch_time for turn in conversation.history] == [1699000000, 1699000180]
    assert conversation.current_question.question == "How should we handle errors?"


def test_parse_conversation_keeps_insertion_order_without_epochs():
    conversation = parse_conversation({
        "conversationHistory": [
            {"question": "second", "answer": "b", "epochTime": 20},
            {"question": "first", "answer": "a"},
        ],
        "currentQuestion": {"question": "now?"},
    })

    assert [turn.question for turn in conversation.history] == ["second", "first"]


def test_parse_conversation_defaults_to_empty_history():
    conversation = parse_conversation({"currentQuestion": {"question": "What is the capital of France?"}})
    assert conversation.history == ()


@pytest.mark.parametrize("payload, rule", [
    (None, "non-null object"),
    ({}, "currentQuestion"),
    ({"currentQuestion": "text"}, "currentQuestion must be an object"),
    ({"currentQuestion": {"question": "  "}}, "non-empty string"),
    ({"currentQuestion": {"question": "Q"}, "conversationHistory": "nope"}, "must be a list"),
    ({"currentQuestion": {"question": "Q"}, "conversationHistory": [{"answer": "a"}]}, r"conversationHistory\[0\]\.question"),
    ({"currentQuestion": {"question": "Q"}, "conversationHistory": [{"question": "q", "answer": 3}]}, "answer"),
    ({"currentQuestion": {"question": "Q"}, "conversationHistory": [{"question": "q", "epochTime": "x"}]}, "epochTime"),
])
def test_parse_conversation_rejects_malformed_input(payload, rule):
    with pytest.raises(ValidationError, match=rule):
        parse_conversation(payload)
