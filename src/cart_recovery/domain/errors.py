"""
Error taxonomy.

Activities raise these; the worker converts them into non-retryable Temporal
ApplicationErrors whose `type` is the class name, which is what the workflow
reports in RecoveryResult.error.
"""


class CartRecoveryError(Exception):
    """Base class for every error raised by this package."""


class AuthenticationError(CartRecoveryError):
    """Webhook signature missing or does not match the shared secret."""


class ExternalServiceError(CartRecoveryError):
    """An external API call failed or returned an unexpected shape."""


class OrderLookupError(ExternalServiceError):
    pass


class IssuerError(ExternalServiceError):
    pass


class SendError(ExternalServiceError):
    pass


class MissingContactError(CartRecoveryError):
    """The cart has no phone number to text."""


class PersistenceError(CartRecoveryError):
    """Writing or reading the reminder log failed."""
