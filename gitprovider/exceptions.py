"""gitprovider exception classes."""


class GitProviderError(Exception):
    """Base exception for all gitprovider errors.

    ``action_taken`` is set by ``reconcile()`` when a write was attempted
    before the error surfaced.
    """

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        self.action_taken = False
        super().__init__(f"[{code}] {message}")


class ConfigurationError(GitProviderError):
    """Raised when client options or environment configuration are invalid."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class InvalidURLError(GitProviderError):
    """Raised when a URL cannot be parsed into a reference."""

    def __init__(self, message: str, code: str = "INVALID_URL") -> None:
        super().__init__(code, message)


class UnsupportedSchemeError(InvalidURLError):
    """Raised when a URL uses a scheme other than https."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="UNSUPPORTED_SCHEME")


class UnsupportedURLPartsError(InvalidURLError):
    """Raised when a URL carries a query, fragment or userinfo."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="UNSUPPORTED_URL_PARTS")


class MissingRepoNameError(GitProviderError):
    """Raised when a repository URL has no repository segment."""

    def __init__(self, message: str) -> None:
        super().__init__("MISSING_REPO_NAME", message)


class ValidationError(GitProviderError):
    """Raised when an object fails field validation.

    ``errors`` holds every violation found, not only the first one.
    """

    def __init__(
        self,
        code: str,
        message: str,
        errors: list[str] | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.errors = errors or []


class InvalidServerDataError(ValidationError):
    """Raised when the provider answered with data violating required invariants."""

    pass


class AuthenticationError(GitProviderError):
    """Raised when the provider rejects the credentials (401)."""

    pass


class AuthorizationError(GitProviderError):
    """Raised when access is denied (403)."""

    pass


class NotFoundError(GitProviderError):
    """Raised when a resource is not found."""

    pass


class ConflictError(GitProviderError):
    """Raised when a resource already exists or the write conflicts."""

    pass


class DestructiveActionDisallowedError(GitProviderError):
    """Raised on delete calls when destructive actions were not enabled."""

    def __init__(self, message: str) -> None:
        super().__init__("DESTRUCTIVE_ACTION_DISALLOWED", message)


class DomainUnsupportedError(GitProviderError):
    """Raised when a reference points at a domain the client doesn't serve."""

    def __init__(self, message: str) -> None:
        super().__init__("DOMAIN_UNSUPPORTED", message)


class NoProviderSupportError(GitProviderError):
    """Raised when the provider has no equivalent of the requested operation."""

    def __init__(self, message: str) -> None:
        super().__init__("NO_PROVIDER_SUPPORT", message)


class TransportError(GitProviderError):
    """Raised when the request could not be completed (network, 5xx, rate limit)."""

    pass


class ServerError(TransportError):
    """Raised on server errors (5xx)."""

    pass


class RateLimitedError(TransportError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class CancelledError(GitProviderError):
    """Raised when the caller's context was cancelled."""

    def __init__(self, message: str = "operation cancelled") -> None:
        super().__init__("CANCELLED", message)
