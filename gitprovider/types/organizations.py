"""Organization and team data models."""

from dataclasses import dataclass, field

from gitprovider.refs import OrganizationInfo


@dataclass
class Organization:
    """An organization (GitHub) or group (GitLab) as seen on the server."""

    ref: OrganizationInfo
    name: str | None
    description: str | None


@dataclass
class Team:
    """A team of an organization and the logins of its members."""

    organization: OrganizationInfo
    name: str
    members: list[str] = field(default_factory=list)
