"""gitprovider resource clients."""

from gitprovider.clients.deploy_keys import DeployKey, DeployKeyClient
from gitprovider.clients.organizations import OrganizationsClient
from gitprovider.clients.repositories import RepositoriesClient, Repository
from gitprovider.clients.team_access import TeamAccess, TeamAccessClient
from gitprovider.clients.teams import TeamsClient

__all__ = [
    "OrganizationsClient",
    "RepositoriesClient",
    "Repository",
    "DeployKeyClient",
    "DeployKey",
    "TeamAccessClient",
    "TeamAccess",
    "TeamsClient",
]
