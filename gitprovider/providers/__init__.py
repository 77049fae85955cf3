"""Provider adapters."""

from gitprovider.providers.github import GitHubProvider
from gitprovider.providers.gitlab import GitLabProvider

__all__ = ["GitHubProvider", "GitLabProvider"]
