"""Boundary validation: raw input mappings in, typed requests out."""

import math
from collections.abc import Mapping

from config.settings import MAX_LATEST_PROMPTS
from convrag.errors import ValidationError
from convrag.models import Conversation, RagRequest, Turn


def _pick(params, *keys):
    for key in keys:
        if key in params:
            return True, params[key]
    return False, None


def _coerce_service_id(value):
    if isinstance(value, bool):
        raise ValidationError("service_id must be a positive integer")
    if isinstance(value, int):
        service_id = value
    elif isinstance(value, str):
        try:
            service_id = int(value.strip())
        except ValueError:
            raise ValidationError("service_id must be a positive integer") from None
    elif isinstance(value, float) and value.is_integer():
        service_id = int(value)
    else:
        raise ValidationError("service_id must be a positive integer")

    if service_id <= 0:
        raise ValidationError("service_id must be a positive integer")
    return service_id


def parse_epoch_key(key):
    """Return the numeric epoch of a latest_prompts key, or raise ValidationError."""
    if isinstance(key, bool):
        raise ValidationError(f"Invalid epoch timestamp key: {key}")
    try:
        epoch = float(key)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid epoch timestamp key: {key}") from None
    if not math.isfinite(epoch) or epoch <= 0:
        raise ValidationError(f"Invalid epoch timestamp key: {key}")
    return epoch


def _validate_latest_prompts(prompts):
    if not isinstance(prompts, Mapping):
        raise ValidationError("latest_prompts must be a non-null object")
    if len(prompts) == 0:
        raise ValidationError("latest_prompts must contain at least one prompt")
    if len(prompts) > MAX_LATEST_PROMPTS:
        raise ValidationError(
            f"latest_prompts cannot contain more than {MAX_LATEST_PROMPTS} prompts"
        )

    validated = {}
    for key, value in prompts.items():
        parse_epoch_key(key)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"Prompt for epoch {key} must be a non-empty string")
        validated[str(key)] = value
    return validated


def parse_rag_request(params):
    """
    Validate the RAG respond input and build a RagRequest.
    Accepts snake_case keys and their camelCase aliases.
    """
    if not isinstance(params, Mapping):
        raise ValidationError("Input must be a non-null object")

    has_service_id, raw_service_id = _pick(params, "service_id", "serviceId")
    has_domain, raw_domain = _pick(params, "domain_name", "domainName")
    if not has_service_id and not has_domain:
        raise ValidationError("Missing required parameter: service_id or domain_name")

    has_prompts, raw_prompts = _pick(params, "latest_prompts", "latestPrompts")
    if not has_prompts:
        raise ValidationError("Missing required parameter: latest_prompts")

    service_id = _coerce_service_id(raw_service_id) if has_service_id else None

    domain_name = None
    if has_domain:
        if not isinstance(raw_domain, str) or not raw_domain.strip():
            raise ValidationError("domain_name must be a non-empty string")
        domain_name = raw_domain.strip()

    latest_prompts = _validate_latest_prompts(raw_prompts)

    debug = params.get("debug", False)
    if not isinstance(debug, bool):
        raise ValidationError("debug flag must be a boolean value")

    return RagRequest(
        latest_prompts=latest_prompts,
        service_id=service_id,
        domain_name=domain_name,
        debug=debug,
    )


def _parse_turn(raw, label):
    if not isinstance(raw, Mapping):
        raise ValidationError(f"{label} must be an object")

    question = raw.get("question")
    if not isinstance(question, str):
        raise ValidationError(f"{label}.question must be a string")

    answer = raw.get("answer")
    if answer is not None and not isinstance(answer, str):
        raise ValidationError(f"{label}.answer must be a string or null")

    epoch_time = raw.get("epochTime")
    if epoch_time is not None and (isinstance(epoch_time, bool) or not isinstance(epoch_time, int)):
        raise ValidationError(f"{label}.epochTime must be an integer")

    return Turn(question=question, answer=answer, epoch_time=epoch_time)


def parse_conversation(payload):
    """Validate the refine-question input and build a Conversation."""
    if not isinstance(payload, Mapping):
        raise ValidationError("Input must be a non-null object")

    if "currentQuestion" not in payload:
        raise ValidationError("Missing required parameter: currentQuestion")
    current = _parse_turn(payload["currentQuestion"], "currentQuestion")
    if not current.question.strip():
        raise ValidationError("currentQuestion.question must be a non-empty string")

    raw_history = payload.get("conversationHistory") or []
    if not isinstance(raw_history, (list, tuple)):
        raise ValidationError("conversationHistory must be a list")
    history = [
        _parse_turn(item, f"conversationHistory[{index}]")
        for index, item in enumerate(raw_history)
    ]

    # Epoch order when every turn is timestamped, otherwise insertion order
    if history and all(turn.epoch_time is not None for turn in history):
        history.sort(key=lambda turn: turn.epoch_time)

    conversation_id = payload.get("conversation_id")
    if conversation_id is not None and not isinstance(conversation_id, str):
        raise ValidationError("conversation_id must be a string")

    return Conversation(
        current_question=current,
        history=tuple(history),
        conversation_id=conversation_id,
    )
