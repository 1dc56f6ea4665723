"""Custom exceptions for the activation engine."""


class ActivationException(Exception):
    """Base exception for all activation engine errors."""

    def __init__(self, message: str, details: dict | None = None):
        """
        Initialize activation exception.

        Args:
            message: Human-readable error message
            details: Optional dict with additional error context
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ProfileSourceError(ActivationException):
    """Raised when a profile document cannot be loaded."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            message=f"Failed to load profile document '{path}': {reason}",
            details={"path": path, "reason": reason},
        )


class ProbeError(ActivationException):
    """Raised by probe implementations when a read fails; absorbed by the evaluator."""

    def __init__(self, probe: str, reason: str):
        super().__init__(message=f"Probe '{probe}' failed: {reason}", details={"probe": probe})
