"""gitprovider type definitions.

This module exports the data model types used by the clients.
"""

from gitprovider.types.organizations import Organization, Team
from gitprovider.types.repos import (
    DEFAULT_TEAM_PERMISSION,
    DeployKeyInfo,
    LicenseTemplate,
    RepositoryCreateOptions,
    RepositoryInfo,
    RepositoryPermission,
    RepositoryVisibility,
    TeamAccessInfo,
    canonical_public_key,
)

__all__ = [
    # Organization types
    "Organization",
    "Team",
    # Repository types
    "RepositoryInfo",
    "RepositoryVisibility",
    "RepositoryCreateOptions",
    "LicenseTemplate",
    "DeployKeyInfo",
    "TeamAccessInfo",
    "RepositoryPermission",
    "DEFAULT_TEAM_PERMISSION",
    "canonical_public_key",
]
