"""Exception hierarchy shared by services and routes."""


class PortalError(Exception):
    """Base class for errors scoped to a single user action."""


class ValidationError(PortalError):
    """A required field is missing or malformed. Raised before any backend call."""


class AuthenticationError(PortalError):
    """The caller could not be authenticated or authorized."""


class CredentialError(AuthenticationError):
    """Email/password pair rejected by the credential provider."""


class BackendError(PortalError):
    """The data store failed. Safe to retry from the user's side."""


class UnsupportedOperation(PortalError):
    """The admin controller does not offer this operation."""


class NotFound(PortalError):
    """No record with the requested identifier."""
