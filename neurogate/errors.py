"""
NeuroGate Errors

The engine has a single error kind: the caller supplied input that
cannot be evaluated. It is always recoverable by resubmitting.
FingerprintsDisabledError belongs to the service layer only.
"""


class InvalidInputError(ValueError):
    """Raised when a payload, trace or state transition is not acceptable."""
    pass


class FingerprintsDisabledError(RuntimeError):
    """Raised when fingerprint operations are requested without a store."""
    pass
