"""Identity and repository references.

References are immutable value objects. They carry no network state and can
be built by hand or by the parsers in ``gitprovider.urls``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable

from gitprovider.validation import Validator


class IdentityType(str, Enum):
    """What kind of actor an IdentityRef points at."""

    USER = "user"
    ORGANIZATION = "organization"
    SUBORGANIZATION = "suborganization"


class TransportType(str, Enum):
    """Transport used to clone a repository."""

    HTTPS = "https"
    GIT = "git"
    SSH = "ssh"


@runtime_checkable
class IdentityRef(Protocol):
    """An organization or user account in a Git provider."""

    domain: str

    @property
    def identity(self) -> str:
        """User login, or ``<organization>[/<sub-organization>...]``."""
        ...

    @property
    def identity_type(self) -> IdentityType: ...

    def is_empty(self) -> bool: ...

    def validate_fields(self, validator: Validator) -> None: ...


@dataclass(frozen=True)
class UserInfo:
    """A user account, e.g. ``https://github.com/octocat``."""

    # Might include a port, e.g. "self-hosted-gitlab.com:6443"
    domain: str
    user_login: str

    @property
    def identity(self) -> str:
        return self.user_login

    @property
    def identity_type(self) -> IdentityType:
        return IdentityType.USER

    def is_empty(self) -> bool:
        return not self.domain and not self.user_login

    def validate_fields(self, validator: Validator) -> None:
        if not self.domain:
            validator.required("domain")
        if not self.user_login:
            validator.required("user_login")

    def __str__(self) -> str:
        return f"https://{self.domain}/{self.identity}"


@dataclass(frozen=True)
class OrganizationInfo:
    """A top-level organization or a nested sub-organization (GitLab subgroup).

    ``gitlab.com/fluxcd/engineering/frontend`` has organization ``fluxcd``
    and sub-organizations ``("engineering", "frontend")``.
    """

    domain: str
    organization: str
    sub_organizations: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "sub_organizations", tuple(self.sub_organizations))

    @property
    def identity(self) -> str:
        return "/".join((self.organization, *self.sub_organizations))

    @property
    def identity_type(self) -> IdentityType:
        if self.sub_organizations:
            return IdentityType.SUBORGANIZATION
        return IdentityType.ORGANIZATION

    def is_empty(self) -> bool:
        return not self.domain and not self.organization and not self.sub_organizations

    def validate_fields(self, validator: Validator) -> None:
        if not self.domain:
            validator.required("domain")
        if not self.organization:
            validator.required("organization")
        for i, sub in enumerate(self.sub_organizations):
            if not sub:
                validator.required(f"sub_organizations[{i}]")

    def __str__(self) -> str:
        return f"https://{self.domain}/{self.identity}"


@dataclass(frozen=True)
class RepositoryRef:
    """A repository owned by a user or an organization.

    ``repository_name`` never carries the ``.git`` suffix.
    """

    owner: UserInfo | OrganizationInfo
    repository_name: str

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "repository_name", self.repository_name.removesuffix(".git")
        )

    @property
    def domain(self) -> str:
        return self.owner.domain

    @property
    def identity(self) -> str:
        return self.owner.identity

    @property
    def identity_type(self) -> IdentityType:
        return self.owner.identity_type

    @property
    def is_organization(self) -> bool:
        return isinstance(self.owner, OrganizationInfo)

    def is_empty(self) -> bool:
        return (self.owner is None or self.owner.is_empty()) and not self.repository_name

    def validate_fields(self, validator: Validator) -> None:
        if self.owner is None:
            validator.required("owner")
        else:
            self.owner.validate_fields(validator)
        if not self.repository_name:
            validator.required("repository_name")

    def get_clone_url(self, transport: TransportType | str) -> str:
        return get_clone_url(self, transport)

    def __str__(self) -> str:
        return f"{self.owner}/{self.repository_name}"


@dataclass(frozen=True)
class SubResourceRef:
    """A named resource living under a repository (deploy key, team access)."""

    repository: RepositoryRef
    name: str

    @property
    def domain(self) -> str:
        return self.repository.domain

    def validate_fields(self, validator: Validator) -> None:
        self.repository.validate_fields(validator)
        if not self.name:
            validator.required("name")

    def __str__(self) -> str:
        return f"{self.repository}[{self.name}]"


def get_clone_url(ref: RepositoryRef, transport: TransportType | str) -> str:
    """
    Build the URL used to clone ``ref`` over ``transport``.

    Args:
        ref: Repository reference
        transport: One of the TransportType values

    Returns:
        The clone URL, or an empty string for an unknown transport
    """
    try:
        kind = TransportType(transport)
    except ValueError:
        return ""

    if kind is TransportType.HTTPS:
        return f"{ref}.git"
    if kind is TransportType.GIT:
        return f"git@{ref.domain}:{ref.identity}/{ref.repository_name}.git"
    return f"ssh://git@{ref.domain}/{ref.identity}/{ref.repository_name}"


__all__ = [
    "IdentityType",
    "TransportType",
    "IdentityRef",
    "UserInfo",
    "OrganizationInfo",
    "RepositoryRef",
    "SubResourceRef",
    "get_clone_url",
]
