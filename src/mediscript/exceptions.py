"""Exception hierarchy for mediscript."""


class MediScriptError(Exception):
    """Base exception for all mediscript errors."""


class ConfigurationError(MediScriptError):
    """Missing or invalid provider credential. Fatal, raised before any call."""


class PrescriptionValidationError(MediScriptError):
    """Prescription or patient payload failed input validation."""


class ProviderCallError(MediScriptError):
    """Raised when a provider call fails (network, auth, quota, empty reply)."""

    def __init__(self, message: str, provider: str = "") -> None:
        super().__init__(message)
        self.provider = provider


class RetryableError(ProviderCallError):
    """Rate limits, timeouts, 5xx."""


class NonRetryableError(ProviderCallError):
    """Auth errors, bad requests, 4xx (non-429). Fail immediately."""


class MalformedResponse(MediScriptError):
    """Reviewer output could not be decoded into an ``Analysis``."""

    def __init__(self, message: str, raw_response: str = "") -> None:
        super().__init__(message)
        self.raw_response = raw_response


class ReconciliationFailure(MediScriptError):
    """The reconciling agent call or its decode failed.

    Never escapes ``Reconciler.compare``; it is absorbed into the
    deterministic fallback comparison.
    """
