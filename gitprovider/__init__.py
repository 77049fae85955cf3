"""gitprovider - provider-agnostic management of Git hosting resources."""

from gitprovider.client import Client
from gitprovider.context import Context
from gitprovider.exceptions import (
    AuthenticationError,
    AuthorizationError,
    CancelledError,
    ConfigurationError,
    ConflictError,
    DestructiveActionDisallowedError,
    DomainUnsupportedError,
    GitProviderError,
    InvalidServerDataError,
    InvalidURLError,
    MissingRepoNameError,
    NoProviderSupportError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    TransportError,
    UnsupportedSchemeError,
    UnsupportedURLPartsError,
    ValidationError,
)
from gitprovider.logging import configure_logging, get_logger
from gitprovider.options import (
    ClientOptions,
    make_client_options,
    with_destructive_api_calls,
    with_domain,
    with_post_chain_transport_hook,
    with_pre_chain_transport_hook,
    with_retry_config,
    with_timeout,
)
from gitprovider.reconcile import ReconcileState
from gitprovider.refs import (
    IdentityRef,
    IdentityType,
    OrganizationInfo,
    RepositoryRef,
    SubResourceRef,
    TransportType,
    UserInfo,
    get_clone_url,
)
from gitprovider.transport import HTTPTransport, RetryConfig
from gitprovider.urls import parse_organization_url, parse_repository_url, parse_user_url

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main Client
    "Client",
    "Context",
    # References
    "IdentityRef",
    "IdentityType",
    "UserInfo",
    "OrganizationInfo",
    "RepositoryRef",
    "SubResourceRef",
    "TransportType",
    "get_clone_url",
    # URL parsing
    "parse_organization_url",
    "parse_user_url",
    "parse_repository_url",
    # Reconciliation
    "ReconcileState",
    # Options
    "ClientOptions",
    "make_client_options",
    "with_domain",
    "with_destructive_api_calls",
    "with_pre_chain_transport_hook",
    "with_post_chain_transport_hook",
    "with_retry_config",
    "with_timeout",
    # Exceptions
    "GitProviderError",
    "ConfigurationError",
    "InvalidURLError",
    "UnsupportedSchemeError",
    "UnsupportedURLPartsError",
    "MissingRepoNameError",
    "ValidationError",
    "InvalidServerDataError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "DestructiveActionDisallowedError",
    "DomainUnsupportedError",
    "NoProviderSupportError",
    "TransportError",
    "ServerError",
    "RateLimitedError",
    "CancelledError",
    # Transport
    "HTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]
