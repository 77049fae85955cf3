"""Client options.

Options are built with the ``with_*`` helpers and merged by
``make_client_options``. Every option may be given at most once.
"""

from collections.abc import Callable
from dataclasses import dataclass, fields

import httpx

from gitprovider.exceptions import ConfigurationError
from gitprovider.transport import RetryConfig

TransportHook = Callable[[httpx.BaseTransport], httpx.BaseTransport]


@dataclass
class ClientOptions:
    """Options shared by all provider clients. ``None`` means unset."""

    domain: str | None = None
    enable_destructive_api_calls: bool | None = None
    # Wraps the network transport, below request logging
    pre_chain_transport_hook: TransportHook | None = None
    # Wraps the logging transport, outermost
    post_chain_transport_hook: TransportHook | None = None
    retry_config: RetryConfig | None = None
    timeout: float | None = None

    def apply_to(self, target: "ClientOptions") -> None:
        """
        Copy every option set here onto ``target``.

        Raises:
            ConfigurationError: If an option is already set on ``target``, or
                an option value is invalid
        """
        if self.domain is not None and not self.domain:
            raise ConfigurationError("domain cannot be an empty string")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")

        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if getattr(target, f.name) is not None:
                raise ConfigurationError(f"option {f.name} has already been set")
            setattr(target, f.name, value)

    @property
    def destructive_actions(self) -> bool:
        return bool(self.enable_destructive_api_calls)


def with_domain(domain: str) -> ClientOptions:
    """Use a custom domain, e.g. a GitHub Enterprise or self-hosted GitLab host."""
    return ClientOptions(domain=domain)


def with_destructive_api_calls(enabled: bool) -> ClientOptions:
    """Allow (or explicitly forbid) delete calls."""
    return ClientOptions(enable_destructive_api_calls=enabled)


def with_pre_chain_transport_hook(hook: TransportHook) -> ClientOptions:
    return ClientOptions(pre_chain_transport_hook=hook)


def with_post_chain_transport_hook(hook: TransportHook) -> ClientOptions:
    return ClientOptions(post_chain_transport_hook=hook)


def with_retry_config(retry_config: RetryConfig) -> ClientOptions:
    return ClientOptions(retry_config=retry_config)


def with_timeout(seconds: float) -> ClientOptions:
    return ClientOptions(timeout=seconds)


def make_client_options(*opts: ClientOptions) -> ClientOptions:
    """
    Merge options into one ClientOptions.

    Raises:
        ConfigurationError: If an option is invalid or given twice
    """
    result = ClientOptions()
    for opt in opts:
        opt.apply_to(result)
    return result


__all__ = [
    "ClientOptions",
    "TransportHook",
    "make_client_options",
    "with_domain",
    "with_destructive_api_calls",
    "with_pre_chain_transport_hook",
    "with_post_chain_transport_hook",
    "with_retry_config",
    "with_timeout",
]
