"""Repositories resource client."""

from gitprovider.adapter import APIObject, ClientContext
from gitprovider.clients.deploy_keys import DeployKeyClient
from gitprovider.clients.team_access import TeamAccessClient
from gitprovider.context import Context, ensure_context
from gitprovider.reconcile import Resource
from gitprovider.refs import OrganizationInfo, RepositoryRef, UserInfo
from gitprovider.types.repos import RepositoryCreateOptions, RepositoryInfo
from gitprovider.validation import Validator


class Repository(Resource[RepositoryRef, RepositoryInfo]):
    """
    A repository handle.

    Besides the get/set/update/reconcile/delete operations it carries the
    sub-clients of the repository: ``deploy_keys`` always, ``team_access``
    only when the repository is owned by an organization (None otherwise).
    """

    def __init__(
        self,
        client: ClientContext,
        ref: RepositoryRef,
        api_object: APIObject | None = None,
        info: RepositoryInfo | None = None,
        create_options: RepositoryCreateOptions | None = None,
    ) -> None:
        super().__init__(
            client,
            client.provider.repositories,
            ref,
            api_object=api_object,
            info=info,
            create_options=create_options,
        )
        self.deploy_keys = DeployKeyClient(client, ref)
        self.team_access: TeamAccessClient | None = None
        if ref.is_organization:
            self.team_access = TeamAccessClient(client, ref)


class RepositoriesClient:
    """Client for repositories owned by organizations, or by users."""

    def __init__(self, client: ClientContext, organization: bool) -> None:
        """
        Initialize the repositories client.

        Args:
            client: Context of the owning client
            organization: Whether this client handles organization-owned
                (True) or user-owned (False) repositories
        """
        self._client = client
        self.organization = organization

    def get(self, ref: RepositoryRef, ctx: Context | None = None) -> Repository:
        """
        Get a repository.

        Raises:
            NotFoundError: If the repository doesn't exist
        """
        self._check(ref)
        obj = self._client.provider.repositories.get(ensure_context(ctx), ref)
        return Repository(self._client, ref, api_object=obj)

    def list(
        self, owner: OrganizationInfo | UserInfo, ctx: Context | None = None
    ) -> list[Repository]:
        """List all repositories of ``owner``."""
        self._client.validate_ref(owner)
        self._check_owner(owner)
        adapter = self._client.provider.repositories
        return [
            Repository(self._client, adapter.ref_from_api(owner, obj), api_object=obj)
            for obj in adapter.list(ensure_context(ctx), owner)
        ]

    def create(
        self,
        ref: RepositoryRef,
        info: RepositoryInfo,
        options: RepositoryCreateOptions | None = None,
        ctx: Context | None = None,
    ) -> Repository:
        """
        Create a repository.

        Raises:
            ConflictError: If the repository already exists
        """
        self._check(ref)
        info.validate_info()
        obj = self._client.provider.repositories.create(
            ensure_context(ctx), ref, info, options
        )
        return Repository(self._client, ref, api_object=obj)

    def reconcile(
        self,
        ref: RepositoryRef,
        info: RepositoryInfo,
        options: RepositoryCreateOptions | None = None,
        ctx: Context | None = None,
    ) -> tuple[Repository, bool]:
        """
        Make sure the repository exists in the desired state.

        ``options`` are only used if the repository has to be created.

        Returns:
            The repository handle and whether an action was taken
        """
        self._check(ref)
        repo = Repository(self._client, ref, info=info, create_options=options)
        action_taken = repo.reconcile(ctx)
        return repo, action_taken

    def _check(self, ref: RepositoryRef) -> None:
        self._client.validate_ref(ref)
        self._check_owner(ref.owner)

    def _check_owner(self, owner: OrganizationInfo | UserInfo) -> None:
        validator = Validator("RepositoryRef")
        if self.organization and not isinstance(owner, OrganizationInfo):
            validator.invalid(owner, "owner")
        if not self.organization and not isinstance(owner, UserInfo):
            validator.invalid(owner, "owner")
        validator.raise_if_invalid()
