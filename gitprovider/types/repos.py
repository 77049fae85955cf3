"""Repository-related data models."""

from dataclasses import dataclass
from enum import Enum

from gitprovider.validation import Validator


class RepositoryVisibility(str, Enum):
    """Visibility of a repository."""

    PUBLIC = "public"
    PRIVATE = "private"
    INTERNAL = "internal"


class RepositoryPermission(str, Enum):
    """Level of access a team has to a repository, lowest first."""

    PULL = "pull"
    TRIAGE = "triage"
    PUSH = "push"
    MAINTAIN = "maintain"
    ADMIN = "admin"


# Granted when team access is created or updated without a permission
DEFAULT_TEAM_PERMISSION = RepositoryPermission.PULL


def canonical_public_key(key: str) -> str:
    """
    Strip an OpenSSH public key down to its type and base64 body.

    Providers drop the trailing comment when they store a key, so
    ``"ssh-ed25519 AAAA... flux@cluster"`` and ``"ssh-ed25519 AAAA..."``
    are the same key.
    """
    return " ".join(key.split()[:2])


class LicenseTemplate(str, Enum):
    """License templates that can be applied when creating a repository."""

    APACHE_2_0 = "apache-2.0"
    MIT = "mit"
    GPL_3_0 = "gpl-3.0"


@dataclass(frozen=True)
class RepositoryInfo:
    """Desired state of a repository.

    Every field is optional; ``None`` means "leave the server value alone".
    """

    description: str | None = None
    default_branch: str | None = None
    visibility: RepositoryVisibility | None = None

    def validate_fields(self, validator: Validator) -> None:
        if self.default_branch is not None and not self.default_branch:
            validator.required("default_branch")
        if self.visibility is not None:
            validator.check_enum(
                self.visibility, list(RepositoryVisibility), "visibility"
            )

    def validate_info(self) -> None:
        validator = Validator("RepositoryInfo")
        self.validate_fields(validator)
        validator.raise_if_invalid()


@dataclass(frozen=True)
class RepositoryCreateOptions:
    """Options only applied when a repository is created."""

    auto_init: bool | None = None
    license_template: LicenseTemplate | None = None


@dataclass(frozen=True)
class DeployKeyInfo:
    """Desired state of a repository deploy key."""

    name: str
    key: str
    read_only: bool | None = None

    def validate_fields(self, validator: Validator) -> None:
        if not self.name:
            validator.required("name")
        if not self.key:
            validator.required("key")

    def validate_info(self) -> None:
        validator = Validator("DeployKeyInfo")
        self.validate_fields(validator)
        validator.raise_if_invalid()


@dataclass(frozen=True)
class TeamAccessInfo:
    """Desired access of a team to a repository."""

    name: str
    permission: RepositoryPermission | None = None

    def validate_fields(self, validator: Validator) -> None:
        if not self.name:
            validator.required("name")
        if self.permission is not None:
            validator.check_enum(
                self.permission, list(RepositoryPermission), "permission"
            )

    def validate_info(self) -> None:
        validator = Validator("TeamAccessInfo")
        self.validate_fields(validator)
        validator.raise_if_invalid()
