"""Error taxonomy for the session ledger.

Every error carries a machine-readable ``code``, a human-readable
``message`` and the HTTP status the API answers with.
"""
from typing import Any, Dict, Optional


class LedgerError(Exception):
    """Base class for all ledger errors."""

    code = "ledger_error"
    status_code = 400
    default_message = "The operation could not be completed"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        self.message = message or self.default_message
        if code:
            self.code = code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API response."""
        return {"success": False, "error": self.message, "code": self.code}


class ValidationError(LedgerError):
    """Raised when input fails validation, before any mutation."""

    code = "validation_error"
    default_message = "Invalid request"


class InsufficientStockError(ValidationError):
    """Raised when a boutique quantity exceeds the live stock."""

    code = "insufficient_stock"
    default_message = "Insufficient stock"


class ProofRequiredError(ValidationError):
    """Raised when a non-cash payment arrives without proof."""

    code = "proof_required"
    default_message = "Payment proof is required for non-cash payments"


class FileTooLargeError(ValidationError):
    """Raised when a proof image exceeds the size limit."""

    code = "file_too_large"
    default_message = "The image cannot be larger than 5MB"


class InvalidFileTypeError(ValidationError):
    """Raised when a proof upload is not an image."""

    code = "invalid_file_type"
    default_message = "Only image files are allowed"


class InvalidStateError(ValidationError):
    """Raised when a session is not in a state that allows the operation."""

    code = "session_not_active"
    status_code = 409
    default_message = "Session is not active"


class ConflictError(LedgerError):
    """Raised when starting a session would break a uniqueness rule."""

    code = "active_session_exists"
    status_code = 409
    default_message = "Model already has an active session"


class NotFoundError(LedgerError):
    """Raised when a referenced session or product does not exist."""

    code = "not_found"
    status_code = 404
    default_message = "Not found"


class UpstreamError(LedgerError):
    """Raised when the persistence or proof collaborator fails.

    The original exception is kept as ``__cause__``.
    """

    code = "save_failed"
    status_code = 502
    default_message = "Save failed. Try again."


class UploadFailedError(UpstreamError):
    """Raised when the proof storage backend rejects an upload."""

    code = "upload_failed"
    default_message = "Payment proof upload failed. Try again."
