"""
Pytest fixtures for gitprovider testing.

Provides common fixtures for testing applications that use gitprovider.
"""

from collections.abc import Generator

import pytest

from gitprovider.client import Client
from gitprovider.options import ClientOptions
from gitprovider.refs import OrganizationInfo, RepositoryRef, UserInfo
from gitprovider.testing.fake import FakeProvider
from gitprovider.types.repos import (
    DeployKeyInfo,
    RepositoryInfo,
    RepositoryPermission,
    RepositoryVisibility,
    TeamAccessInfo,
)

TEST_DOMAIN = "github.com"


# ============================================================================
# Fake Provider Fixtures
# ============================================================================


@pytest.fixture
def fake_provider() -> Generator[FakeProvider, None, None]:
    """
    Provide an empty FakeProvider serving ``github.com``.

    Example:
        ```python
        def test_my_feature(fake_provider, fake_client):
            my_function(fake_client)
            assert fake_provider.was_called("repository.create")
        ```
    """
    provider = FakeProvider(domain=TEST_DOMAIN)
    yield provider
    provider.reset()


@pytest.fixture
def fake_client(fake_provider: FakeProvider) -> Client:
    """Provide a Client over ``fake_provider`` with destructive calls disabled."""
    return Client(fake_provider)


@pytest.fixture
def destructive_client(fake_provider: FakeProvider) -> Client:
    """Provide a Client over ``fake_provider`` that may delete resources."""
    return Client(fake_provider, ClientOptions(enable_destructive_api_calls=True))


# ============================================================================
# Sample Reference Fixtures
# ============================================================================


@pytest.fixture
def org_ref() -> OrganizationInfo:
    return OrganizationInfo(domain=TEST_DOMAIN, organization="fluxcd")


@pytest.fixture
def user_ref() -> UserInfo:
    return UserInfo(domain=TEST_DOMAIN, user_login="octocat")


@pytest.fixture
def org_repo_ref(org_ref: OrganizationInfo) -> RepositoryRef:
    return RepositoryRef(owner=org_ref, repository_name="flux2")


@pytest.fixture
def user_repo_ref(user_ref: UserInfo) -> RepositoryRef:
    return RepositoryRef(owner=user_ref, repository_name="hello-world")


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_repository_info() -> RepositoryInfo:
    """Provide a fully set RepositoryInfo."""
    return RepositoryInfo(
        description="Open and extensible continuous delivery solution",
        default_branch="main",
        visibility=RepositoryVisibility.PRIVATE,
    )


@pytest.fixture
def sample_deploy_key_info() -> DeployKeyInfo:
    return DeployKeyInfo(
        name="flux-sync",
        key="ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIFakeKeyForTesting",
        read_only=True,
    )


@pytest.fixture
def sample_team_access_info() -> TeamAccessInfo:
    return TeamAccessInfo(name="maintainers", permission=RepositoryPermission.MAINTAIN)


# ============================================================================
# Pre-seeded Provider Fixtures
# ============================================================================


@pytest.fixture
def client_with_repo(
    fake_provider: FakeProvider,
    fake_client: Client,
    org_repo_ref: RepositoryRef,
    sample_repository_info: RepositoryInfo,
) -> Client:
    """
    Provide a client whose provider already holds ``org_repo_ref``.

    The stored repository matches ``sample_repository_info``.
    """
    fake_provider.repositories.seed(org_repo_ref, sample_repository_info)
    return fake_client
