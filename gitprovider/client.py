"""
gitprovider main client.

Provides the primary interface for managing organizations, repositories,
teams, deploy keys and team access on a Git provider.
"""

import os
from typing import Any

from gitprovider.adapter import ClientContext, Provider
from gitprovider.clients import OrganizationsClient, RepositoriesClient, TeamsClient
from gitprovider.exceptions import ConfigurationError
from gitprovider.options import (
    ClientOptions,
    make_client_options,
    with_destructive_api_calls,
    with_domain,
)
from gitprovider.providers import github as github_provider
from gitprovider.providers import gitlab as gitlab_provider
from gitprovider.transport import HTTPTransport


class Client:
    """
    Main client for interacting with one Git provider.

    Aggregates the resource clients and enforces the destructive-action gate.

    Example:
        ```python
        from gitprovider import Client, parse_repository_url
        from gitprovider.types import RepositoryInfo, RepositoryVisibility

        client = Client.github(token=os.environ["GITHUB_TOKEN"])
        ref = parse_repository_url("https://github.com/my-org/my-repo", True)
        repo, action_taken = client.org_repositories.reconcile(
            ref, RepositoryInfo(visibility=RepositoryVisibility.PRIVATE)
        )
        ```
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(self, provider: Provider, options: ClientOptions | None = None) -> None:
        """
        Initialize the client.

        Args:
            provider: The provider adapters to talk through
            options: Client options; only ``enable_destructive_api_calls`` is
                read here, the transport options are consumed by the
                ``github``/``gitlab`` factories
        """
        self.options = options or ClientOptions()
        self.provider = provider
        self._context = ClientContext(
            provider=provider, destructive_actions=self.options.destructive_actions
        )

        # Initialize resource clients
        self.organizations = OrganizationsClient(self._context)
        self.org_repositories = RepositoriesClient(self._context, organization=True)
        self.user_repositories = RepositoriesClient(self._context, organization=False)
        self.teams = TeamsClient(self._context)

    @classmethod
    def github(cls, token: str | None = None, *opts: ClientOptions) -> "Client":
        """
        Create a GitHub client.

        Args:
            token: Personal access token (optional, unauthenticated otherwise)
            *opts: Client options, e.g. ``with_domain("github.example.com")``
                for GitHub Enterprise

        Raises:
            ConfigurationError: If an option is invalid or given twice
        """
        options = make_client_options(*opts)
        domain = options.domain or github_provider.DEFAULT_DOMAIN
        transport = cls._make_transport(
            options,
            github_provider.api_base_url(domain),
            token,
            headers={"Accept": "application/vnd.github+json"},
        )
        return cls(github_provider.GitHubProvider(transport, domain), options)

    @classmethod
    def gitlab(cls, token: str | None = None, *opts: ClientOptions) -> "Client":
        """
        Create a GitLab client.

        Args:
            token: Personal or project access token
            *opts: Client options, e.g. ``with_domain("gitlab.example.com")``

        Raises:
            ConfigurationError: If an option is invalid or given twice
        """
        options = make_client_options(*opts)
        domain = options.domain or gitlab_provider.DEFAULT_DOMAIN
        transport = cls._make_transport(
            options,
            gitlab_provider.api_base_url(domain),
            token,
            token_header="PRIVATE-TOKEN",
            token_prefix="",
        )
        return cls(gitlab_provider.GitLabProvider(transport, domain), options)

    @classmethod
    def from_env(cls, *opts: ClientOptions) -> "Client":
        """
        Create a client from environment variables.

        Environment variables:
            GITPROVIDER_PROVIDER: "github" or "gitlab" (required)
            GITPROVIDER_TOKEN: Access token (optional)
            GITPROVIDER_DOMAIN: Custom domain (optional)
            GITPROVIDER_DESTRUCTIVE_ACTIONS: "true" to allow deletes (optional)

        Args:
            *opts: Further client options; options also given through the
                environment must not be repeated here

        Returns:
            Configured Client instance

        Raises:
            ConfigurationError: If required environment variables are missing
                or invalid
        """
        provider = os.environ.get("GITPROVIDER_PROVIDER", "").lower()
        token = os.environ.get("GITPROVIDER_TOKEN") or None
        domain = os.environ.get("GITPROVIDER_DOMAIN")
        destructive = os.environ.get("GITPROVIDER_DESTRUCTIVE_ACTIONS")

        if not provider:
            raise ConfigurationError("GITPROVIDER_PROVIDER environment variable not set")

        env_opts = list(opts)
        if domain:
            env_opts.append(with_domain(domain))
        if destructive:
            if destructive.lower() not in ("true", "false", "1", "0"):
                raise ConfigurationError(
                    f"Invalid GITPROVIDER_DESTRUCTIVE_ACTIONS: {destructive}. "
                    "Must be 'true' or 'false'"
                )
            env_opts.append(with_destructive_api_calls(destructive.lower() in ("true", "1")))

        if provider == "github":
            return cls.github(token, *env_opts)
        elif provider == "gitlab":
            return cls.gitlab(token, *env_opts)
        raise ConfigurationError(
            f"Invalid GITPROVIDER_PROVIDER: {provider}. Must be 'github' or 'gitlab'"
        )

    @classmethod
    def _make_transport(
        cls,
        options: ClientOptions,
        base_url: str,
        token: str | None,
        **kwargs: Any,
    ) -> HTTPTransport:
        return HTTPTransport(
            base_url=base_url,
            token=token,
            timeout=options.timeout or cls.DEFAULT_TIMEOUT,
            retry_config=options.retry_config,
            pre_chain_hook=options.pre_chain_transport_hook,
            post_chain_hook=options.post_chain_transport_hook,
            **kwargs,
        )

    @property
    def domain(self) -> str:
        return self.provider.domain

    @property
    def provider_name(self) -> str:
        return self.provider.name

    @property
    def destructive_actions(self) -> bool:
        return self._context.destructive_actions

    def close(self) -> None:
        """Close the client and release resources."""
        self.provider.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
