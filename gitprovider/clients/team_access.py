"""Team access resource client.

Team access only exists for organization-owned repositories.
"""

from gitprovider.adapter import APIObject, ClientContext
from gitprovider.context import Context, ensure_context
from gitprovider.reconcile import Resource
from gitprovider.refs import RepositoryRef, SubResourceRef
from gitprovider.types.repos import TeamAccessInfo


class TeamAccess(Resource[SubResourceRef, TeamAccessInfo]):
    """The access of one team to a repository."""

    def __init__(
        self,
        client: ClientContext,
        ref: SubResourceRef,
        api_object: APIObject | None = None,
        info: TeamAccessInfo | None = None,
    ) -> None:
        super().__init__(
            client, client.provider.team_access, ref, api_object=api_object, info=info
        )


class TeamAccessClient:
    """Client for the teams that have access to one repository."""

    def __init__(self, client: ClientContext, repository: RepositoryRef) -> None:
        self._client = client
        self.repository = repository

    def get(self, name: str, ctx: Context | None = None) -> TeamAccess:
        """
        Get the access of team ``name``.

        Raises:
            NotFoundError: If the team has no access to the repository
        """
        ref = SubResourceRef(self.repository, name)
        self._client.validate_ref(ref)
        obj = self._client.provider.team_access.get(ensure_context(ctx), ref)
        return TeamAccess(self._client, ref, api_object=obj)

    def list(self, ctx: Context | None = None) -> list[TeamAccess]:
        self._client.validate_ref(self.repository)
        adapter = self._client.provider.team_access
        return [
            TeamAccess(self._client, adapter.ref_from_api(self.repository, obj), api_object=obj)
            for obj in adapter.list(ensure_context(ctx), self.repository)
        ]

    def create(self, info: TeamAccessInfo, ctx: Context | None = None) -> TeamAccess:
        """Give team ``info.name`` access to the repository."""
        info.validate_info()
        ref = SubResourceRef(self.repository, info.name)
        self._client.validate_ref(ref)
        obj = self._client.provider.team_access.create(ensure_context(ctx), ref, info)
        return TeamAccess(self._client, ref, api_object=obj)

    def reconcile(
        self, info: TeamAccessInfo, ctx: Context | None = None
    ) -> tuple[TeamAccess, bool]:
        ref = SubResourceRef(self.repository, info.name)
        self._client.validate_ref(ref)
        access = TeamAccess(self._client, ref, info=info)
        action_taken = access.reconcile(ctx)
        return access, action_taken
