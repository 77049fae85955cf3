"""Provider adapter contract.

The reconcile engine and the resource clients only talk to providers through
these protocols. Every adapter method returns validated, fully paginated data
or raises a classified GitProviderError (NotFoundError,
InvalidServerDataError, TransportError, ...).
"""

from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

from gitprovider.context import Context
from gitprovider.exceptions import DomainUnsupportedError
from gitprovider.refs import OrganizationInfo, RepositoryRef, SubResourceRef
from gitprovider.types.organizations import Organization, Team
from gitprovider.types.repos import DeployKeyInfo, RepositoryInfo, TeamAccessInfo
from gitprovider.validation import validate_target

APIObject = dict[str, Any]

RefT = TypeVar("RefT")
InfoT = TypeVar("InfoT")
ScopeT = TypeVar("ScopeT")


class ResourceAdapter(Protocol[RefT, InfoT, ScopeT]):
    """Provider-side operations for one resource kind."""

    # Used in log records and error messages, e.g. "repository"
    kind: str
    # Fields of the Info type that participate in the reconcile diff
    settable_fields: tuple[str, ...]

    def get(self, ctx: Context, ref: RefT) -> APIObject:
        """Fetch one resource; NotFoundError if it doesn't exist."""
        ...

    def list(self, ctx: Context, scope: ScopeT) -> list[APIObject]:
        """List every resource under ``scope``."""
        ...

    def create(
        self, ctx: Context, ref: RefT, info: InfoT, options: Any | None = None
    ) -> APIObject:
        """Create the resource described by ``info`` at ``ref``."""
        ...

    def update(self, ctx: Context, ref: RefT, body: APIObject) -> APIObject:
        """Write ``body`` (the current object with desired overrides) back."""
        ...

    def delete(self, ctx: Context, ref: RefT) -> None: ...

    def from_api(self, obj: APIObject) -> InfoT:
        """Project an API object onto its settable fields."""
        ...

    def to_api(self, info: InfoT) -> APIObject:
        """Map the set (non-None) fields of ``info`` to API fields."""
        ...

    def ref_from_api(self, scope: ScopeT, obj: APIObject) -> RefT:
        """Build the reference of a listed object."""
        ...


class OrganizationAdapter(Protocol):
    """Read-only organization (group) operations."""

    def get(self, ctx: Context, ref: OrganizationInfo) -> Organization: ...

    # Declared before ``list``, which shadows the builtin in the class body
    def children(self, ctx: Context, ref: OrganizationInfo) -> list[Organization]:
        """List the direct sub-organizations of ``ref``."""
        ...

    def list(self, ctx: Context) -> list[Organization]: ...


class TeamAdapter(Protocol):
    """Read-only team and membership operations."""

    def get(self, ctx: Context, org: OrganizationInfo, name: str) -> Team: ...

    def list(self, ctx: Context, org: OrganizationInfo) -> list[Team]: ...


class Provider(Protocol):
    """The adapters of one Git provider, bound to one domain."""

    name: str
    domain: str
    repositories: ResourceAdapter[RepositoryRef, RepositoryInfo, Any]
    deploy_keys: ResourceAdapter[SubResourceRef, DeployKeyInfo, RepositoryRef]
    team_access: ResourceAdapter[SubResourceRef, TeamAccessInfo, RepositoryRef]
    organizations: OrganizationAdapter
    teams: TeamAdapter

    def close(self) -> None: ...


@dataclass(frozen=True)
class ClientContext:
    """What resource handles and sub-clients need from their client."""

    provider: Provider
    destructive_actions: bool = False

    def validate_ref(self, ref: Any) -> None:
        """
        Check a reference before it is used for any request.

        Raises:
            ValidationError: If required fields of ``ref`` are missing
            DomainUnsupportedError: If ``ref`` points at another domain
        """
        validate_target(type(ref).__name__, ref)
        if ref.domain != self.provider.domain:
            raise DomainUnsupportedError(
                f"{ref} is not on {self.provider.domain}, "
                f"the domain served by this {self.provider.name} client"
            )
