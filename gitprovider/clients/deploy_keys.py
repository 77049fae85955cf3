"""Deploy keys resource client."""

from gitprovider.adapter import APIObject, ClientContext
from gitprovider.context import Context, ensure_context
from gitprovider.reconcile import Resource
from gitprovider.refs import RepositoryRef, SubResourceRef
from gitprovider.types.repos import DeployKeyInfo


class DeployKey(Resource[SubResourceRef, DeployKeyInfo]):
    """A deploy key of a repository, identified by its name (title)."""

    def __init__(
        self,
        client: ClientContext,
        ref: SubResourceRef,
        api_object: APIObject | None = None,
        info: DeployKeyInfo | None = None,
    ) -> None:
        super().__init__(
            client, client.provider.deploy_keys, ref, api_object=api_object, info=info
        )


class DeployKeyClient:
    """Client for the deploy keys of one repository."""

    def __init__(self, client: ClientContext, repository: RepositoryRef) -> None:
        """
        Initialize the deploy keys client.

        Args:
            client: Context of the owning client
            repository: The repository whose keys are managed
        """
        self._client = client
        self.repository = repository

    def get(self, name: str, ctx: Context | None = None) -> DeployKey:
        """
        Get a deploy key by name.

        Raises:
            NotFoundError: If no key has that name
        """
        ref = SubResourceRef(self.repository, name)
        self._client.validate_ref(ref)
        obj = self._client.provider.deploy_keys.get(ensure_context(ctx), ref)
        return DeployKey(self._client, ref, api_object=obj)

    def list(self, ctx: Context | None = None) -> list[DeployKey]:
        """List all deploy keys of the repository."""
        self._client.validate_ref(self.repository)
        adapter = self._client.provider.deploy_keys
        return [
            DeployKey(self._client, adapter.ref_from_api(self.repository, obj), api_object=obj)
            for obj in adapter.list(ensure_context(ctx), self.repository)
        ]

    def create(self, info: DeployKeyInfo, ctx: Context | None = None) -> DeployKey:
        """
        Create a deploy key.

        Raises:
            ConflictError: If a key with the same name or content exists
        """
        info.validate_info()
        ref = SubResourceRef(self.repository, info.name)
        self._client.validate_ref(ref)
        obj = self._client.provider.deploy_keys.create(ensure_context(ctx), ref, info)
        return DeployKey(self._client, ref, api_object=obj)

    def reconcile(
        self, info: DeployKeyInfo, ctx: Context | None = None
    ) -> tuple[DeployKey, bool]:
        """
        Make sure a deploy key named ``info.name`` exists in the desired state.

        Returns:
            The key handle and whether an action was taken
        """
        ref = SubResourceRef(self.repository, info.name)
        self._client.validate_ref(ref)
        key = DeployKey(self._client, ref, info=info)
        action_taken = key.reconcile(ctx)
        return key, action_taken
