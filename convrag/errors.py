"""Error taxonomy shared by both pipelines."""


class ConvRagError(Exception):
    """Base class for pipeline failures."""


class ValidationError(ConvRagError):
    """Malformed input; raised before any external call is made."""


class ServiceResolutionError(ConvRagError):
    """No registry row for the requested service id, domain or default domain."""


class CompletionServiceError(ConvRagError):
    """The completion gateway failed or returned no usable text."""


class RetrievalError(ConvRagError):
    """The search gateway failed or returned no usable result."""


class AuditWriteFailure(ConvRagError):
    """A debug or error record could not be persisted.

    Only ever carried inside an ``AuditResult``; never raised to callers.
    """

    def __init__(self, kind, cause):
        super().__init__(f"Failed to write {kind} record: {cause}")
        self.kind = kind
        self.cause = cause
