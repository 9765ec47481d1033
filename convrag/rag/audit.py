import json

from convrag.errors import AuditWriteFailure
from convrag.logger import get_logger
from convrag.models import AuditResult

logger = get_logger(__name__)


def _to_json(value):
    return json.dumps(value, default=str)


class AuditLog:
    """Best-effort writer for error and debug records.

    Every method returns an AuditResult; a failed write is logged and
    reported in the result, never raised.
    """

    def __init__(self, store):
        self.store = store

    def _write(self, kind, writer, payload):
        try:
            record_id = writer()
        except Exception as e:
            failure = AuditWriteFailure(kind, e)
            logger.error("%s | %s", failure, payload)
            return AuditResult(written=False, error=failure)
        return AuditResult(written=True, record_id=record_id)

    def record_error(self, procedure_name, message, input_params):
        return self._write(
            "error",
            lambda: self.store.add_error_record(
                procedure_name, message, _to_json(input_params)
            ),
            {"procedure": procedure_name, "message": message},
        )

    def record_debug(self, service_id, input_params, question_summary,
                     rag_results, llm_response, elapsed_ms):
        return self._write(
            "debug",
            lambda: self.store.add_debug_record(
                service_id,
                _to_json(input_params),
                question_summary,
                _to_json(rag_results),
                llm_response,
                elapsed_ms,
            ),
            {"service_id": service_id, "elapsed_ms": elapsed_ms},
        )
