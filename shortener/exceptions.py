"""Exception hierarchy for the URL shortener."""


class ShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = "app:shortener_error"


class InvalidInputError(ShortenerError, ValueError):
    """Raised when a caller supplies a malformed URL, expiry option or credential field."""

    error_code = "input:invalid_input_error"


class LinkNotFoundError(ShortenerError):
    """Raised when a code is unknown, inactive, or not owned by the caller."""

    error_code = "link:link_not_found_error"


class DuplicateCodeError(ShortenerError):
    """Raised by the store when an insert collides with an existing code."""

    error_code = "store:duplicate_code_error"


class ActiveLinkExistsError(ShortenerError):
    """Raised by the store when an active link already exists for (target, owner)."""

    error_code = "store:active_link_exists_error"


class AllocationExhaustedError(ShortenerError):
    """Raised when no free code could be allocated within the attempt budget."""

    error_code = "link:allocation_exhausted_error"


class StoreError(ShortenerError):
    """Raised when the underlying database fails.

    The original database error is chained as ``__cause__`` and logged; it is
    never included in client-facing messages.
    """

    error_code = "store:store_error"


class UserExistsError(ShortenerError):
    """Raised when registering a username or email that is already taken."""

    error_code = "auth:user_exists_error"


class InvalidCredentialsError(ShortenerError):
    """Raised when a login attempt does not match a stored user."""

    error_code = "auth:invalid_credentials_error"


class AuthenticationRequiredError(ShortenerError):
    """Raised when an operation needs a logged-in caller and there is none."""

    error_code = "auth:authentication_required_error"
