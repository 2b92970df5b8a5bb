"""Policy error definitions.

All policy errors are defined here with their corresponding error codes.
Every rejection raised by the decision procedure is a ValidationError whose
code identifies the kind of failure.
"""

from enum import Enum


class PolicyErrorCode(str, Enum):
    """Standardized error codes for policy decisions.

    Format: E_CATEGORY_NAME
    """

    # Allowlist errors
    E_TAG_NOT_ALLOWED = "E_TAG_NOT_ALLOWED"
    E_ATTRIBUTE_NOT_ALLOWED = "E_ATTRIBUTE_NOT_ALLOWED"

    # Attribute value errors
    E_DANGEROUS_ATTRIBUTE_MISSING_VALUE = "E_DANGEROUS_ATTRIBUTE_MISSING_VALUE"
    E_INVALID_URL = "E_INVALID_URL"
    E_DISALLOWED_PROTOCOL = "E_DISALLOWED_PROTOCOL"
    E_UNENCRYPTED_HTTP = "E_UNENCRYPTED_HTTP"
    E_HANDLER_REJECTED = "E_HANDLER_REJECTED"

    # Configuration errors
    E_PROTOCOL_REQUIRED = "E_PROTOCOL_REQUIRED"
    E_UNKNOWN_PROFILE = "E_UNKNOWN_PROFILE"


# Codes raised by URLValidator and the composite handlers built on it
URL_ERROR_CODES: frozenset[PolicyErrorCode] = frozenset(
    {
        PolicyErrorCode.E_DANGEROUS_ATTRIBUTE_MISSING_VALUE,
        PolicyErrorCode.E_INVALID_URL,
        PolicyErrorCode.E_DISALLOWED_PROTOCOL,
        PolicyErrorCode.E_UNENCRYPTED_HTTP,
    }
)


class PolicyError(Exception):
    """Base exception for policy errors.

    Attributes:
        code: The error code enum value
        message: Human-readable error message
    """

    def __init__(self, code: PolicyErrorCode, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


class ValidationError(PolicyError):
    """A (tag, attribute, value) triple was rejected.

    Attributes:
        tag: The tag being checked.
        attribute: The attribute being checked, or None for a bare tag check.
        message: The rejection reason, without the tag/attribute prefix.
        cause: The underlying error (e.g. a URL parse failure), if any.
    """

    def __init__(
        self,
        tag: str,
        attribute: str | None,
        message: str,
        *,
        code: PolicyErrorCode = PolicyErrorCode.E_HANDLER_REJECTED,
        cause: BaseException | None = None,
    ):
        self.tag = tag
        self.attribute = attribute
        self.cause = cause
        super().__init__(code, message)
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.attribute:
            return f"not allowing {self.tag}.{self.attribute}: {self.message}"
        return f"not allowing tag {self.tag}: {self.message}"


class ProtocolRequiredError(PolicyError, ValueError):
    """add_protocol() was called with an empty protocol."""

    def __init__(self, message: str = "protocol is required"):
        super().__init__(PolicyErrorCode.E_PROTOCOL_REQUIRED, message)


class UnknownProfileError(PolicyError, KeyError):
    """A policy profile name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(PolicyErrorCode.E_UNKNOWN_PROFILE, f"unknown policy profile '{name}'")

    def __str__(self) -> str:
        return self.message
