"""Organizations resource client."""

from gitprovider.adapter import ClientContext
from gitprovider.context import Context, ensure_context
from gitprovider.refs import OrganizationInfo
from gitprovider.types.organizations import Organization


class OrganizationsClient:
    """Client for organization (GitLab: group) operations."""

    def __init__(self, client: ClientContext) -> None:
        self._client = client

    def get(self, ref: OrganizationInfo, ctx: Context | None = None) -> Organization:
        """
        Get an organization.

        Raises:
            NotFoundError: If the organization doesn't exist or isn't visible
        """
        self._client.validate_ref(ref)
        return self._client.provider.organizations.get(ensure_context(ctx), ref)

    def children(
        self, ref: OrganizationInfo, ctx: Context | None = None
    ) -> list[Organization]:
        """
        List the direct sub-organizations of ``ref``.

        Raises:
            NoProviderSupportError: If the provider has no sub-organizations
        """
        self._client.validate_ref(ref)
        return self._client.provider.organizations.children(ensure_context(ctx), ref)

    def list(self, ctx: Context | None = None) -> list[Organization]:
        """List the top-level organizations the caller can see."""
        return self._client.provider.organizations.list(ensure_context(ctx))
