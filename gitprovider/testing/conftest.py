"""
Pytest plugin for gitprovider testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest when this package is installed.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["gitprovider.testing.conftest"]

Or import the fixtures directly:

    from gitprovider.testing.fixtures import fake_client, org_repo_ref
"""

# Re-export all fixtures for pytest auto-discovery
from gitprovider.testing.fixtures import (
    client_with_repo,
    destructive_client,
    fake_client,
    fake_provider,
    org_ref,
    org_repo_ref,
    sample_deploy_key_info,
    sample_repository_info,
    sample_team_access_info,
    user_ref,
    user_repo_ref,
)

__all__ = [
    "fake_provider",
    "fake_client",
    "destructive_client",
    "org_ref",
    "user_ref",
    "org_repo_ref",
    "user_repo_ref",
    "sample_repository_info",
    "sample_deploy_key_info",
    "sample_team_access_info",
    "client_with_repo",
]
