"""
Authentication module exceptions.

These exceptions are raised by the auth module and caught at the login
flow boundary, where they become the message shown on the current step.
"""

from shared.exceptions import HeartBridgeError, PersistenceError, ValidationError


class TokenPersistenceError(PersistenceError):
    """Raised when the OS keychain rejects a credential operation."""

    def __init__(self, message: str = "Could not access secure storage"):
        super().__init__(message, store="credential", code="TOKEN_PERSISTENCE_FAILED")


class InvalidRoleError(ValidationError):
    """Raised when a role string is neither parent nor expert."""

    def __init__(self, role: str):
        super().__init__(
            f"Unknown role: {role}",
            code="INVALID_ROLE",
            details={"role": role},
        )


class ResendCooldownError(ValidationError):
    """Raised when a verification code is requested again too soon."""

    def __init__(self, retry_after: int):
        super().__init__(
            f"Please wait {retry_after} seconds before requesting a new code.",
            code="RESEND_COOLDOWN",
            details={"retry_after": retry_after},
        )
        self.retry_after = retry_after


class FlowStateError(HeartBridgeError):
    """Raised when a login flow operation is invoked on the wrong step."""

    def __init__(self, operation: str, step: str):
        super().__init__(
            f"Cannot {operation} on step {step}",
            code="INVALID_FLOW_STATE",
            details={"operation": operation, "step": step},
        )
