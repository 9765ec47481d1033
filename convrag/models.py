"""Typed values passed between the pipeline components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Turn:
    question: str
    answer: Optional[str] = None
    epoch_time: Optional[int] = None


@dataclass(frozen=True)
class Conversation:
    current_question: Turn
    history: Tuple[Turn, ...] = ()
    conversation_id: Optional[str] = None


@dataclass(frozen=True)
class RagRequest:
    """Validated input of the RAG respond entry point."""

    latest_prompts: Dict[str, str]
    service_id: Optional[int] = None
    domain_name: Optional[str] = None
    debug: bool = False


@dataclass(frozen=True)
class ServiceRegistryEntry:
    fq_service_name: str
    is_active: bool
    effective_date: Optional[str] = None
    service_id: Optional[int] = None
    domain_name: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ServiceRegistryEntry":
        return cls(
            fq_service_name=row["fq_service_name"],
            is_active=bool(row["is_active"]),
            effective_date=row.get("effective_date"),
            service_id=row.get("service_id"),
            domain_name=row.get("domain_name"),
        )


@dataclass(frozen=True)
class ClassificationResult:
    sufficient: bool
    answer: str = ""


@dataclass(frozen=True)
class RefinementResult:
    refined_question: str
    refined: bool
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "refinedQuestion": self.refined_question,
            "refined": self.refined,
        }
        if self.message is not None:
            payload["message"] = self.message
        return payload


@dataclass(frozen=True)
class RagResponse:
    llm_response: str
    question_summary: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "llm_response": self.llm_response,
            "question_summary": self.question_summary,
        }


@dataclass(frozen=True)
class AuditResult:
    """Outcome of a best-effort audit write. A failed write is not an error."""

    written: bool
    record_id: Optional[str] = None
    error: Optional[Exception] = field(default=None, compare=False)
