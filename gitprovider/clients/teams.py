"""Teams resource client."""

from gitprovider.adapter import ClientContext
from gitprovider.context import Context, ensure_context
from gitprovider.refs import OrganizationInfo
from gitprovider.types.organizations import Team


class TeamsClient:
    """Client for the teams of an organization and their members."""

    def __init__(self, client: ClientContext) -> None:
        self._client = client

    def get(self, org: OrganizationInfo, name: str, ctx: Context | None = None) -> Team:
        """
        Get a team and its members.

        Raises:
            NotFoundError: If the team doesn't exist
        """
        self._client.validate_ref(org)
        return self._client.provider.teams.get(ensure_context(ctx), org, name)

    def list(self, org: OrganizationInfo, ctx: Context | None = None) -> list[Team]:
        self._client.validate_ref(org)
        return self._client.provider.teams.list(ensure_context(ctx), org)
