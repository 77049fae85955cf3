"""Parsing of HTTPS Git hosting URLs into references.

The whole path is treated as ``<organization>[/<sub-organization>...]``; for
repositories the last segment is the repository name. One segmentation
serves both flat (``github.com/org/repo``) and nested
(``gitlab.com/group/subgroup/repo``) hosting models.
"""

from urllib.parse import urlsplit

from gitprovider.exceptions import (
    InvalidURLError,
    MissingRepoNameError,
    UnsupportedSchemeError,
    UnsupportedURLPartsError,
)
from gitprovider.refs import OrganizationInfo, RepositoryRef, UserInfo


def _parse_url(raw: str) -> tuple[str, list[str]]:
    """
    Split an HTTPS URL into its host and path segments.

    Args:
        raw: URL such as ``https://gitlab.com/fluxcd/engineering``

    Returns:
        Tuple of host (may include ``:port``) and the ordered, non-empty
        path segments

    Raises:
        InvalidURLError: If the URL is empty, malformed or has an empty segment
        UnsupportedSchemeError: If the scheme isn't https
        UnsupportedURLPartsError: If the URL has a query, fragment or userinfo
    """
    if not raw:
        raise InvalidURLError("url cannot be empty")

    try:
        parts = urlsplit(raw)
        # Accessing port validates it
        parts.port
    except ValueError as e:
        raise InvalidURLError(f"cannot parse url {raw!r}: {e}") from e

    if parts.scheme != "https":
        raise UnsupportedSchemeError(f"only https URLs are supported: {raw}")

    # Anything extra would break the parse/serialize round-trip
    if "?" in raw or "#" in raw or "@" in parts.netloc:
        raise UnsupportedURLPartsError(
            f"query, fragment and credentials are not supported: {raw}"
        )

    if not parts.netloc:
        raise InvalidURLError(f"url has no host: {raw}")

    path = parts.path.removeprefix("/").removesuffix("/")
    segments = path.split("/")
    # Also guarantees there is at least one segment
    if any(not segment for segment in segments):
        raise InvalidURLError(f"url has an empty path segment: {raw}")

    return parts.netloc, segments


def parse_organization_url(raw: str) -> OrganizationInfo:
    """
    Parse a URL pointing at an organization.

    ``https://gitlab.com/fluxcd/engineering`` yields organization ``fluxcd``
    with sub-organizations ``("engineering",)``.
    """
    host, segments = _parse_url(raw)
    return OrganizationInfo(
        domain=host,
        organization=segments[0],
        sub_organizations=tuple(segments[1:]),
    )


def parse_user_url(raw: str) -> UserInfo:
    """
    Parse a URL pointing at a user account.

    Raises:
        InvalidURLError: If the URL has more than one path segment
    """
    return _org_to_user(parse_organization_url(raw), raw)


def parse_repository_url(raw: str, is_organization: bool) -> RepositoryRef:
    """
    Parse a URL pointing at a repository.

    Args:
        raw: Repository URL; a trailing ``.git`` is accepted and stripped
        is_organization: Whether the owner is an organization or a user

    Returns:
        RepositoryRef whose owner is an OrganizationInfo or a UserInfo

    Raises:
        MissingRepoNameError: If the URL only names an owner
        InvalidURLError: If the URL is malformed, or names a user with sub-paths
    """
    org = parse_organization_url(raw)
    if not org.sub_organizations:
        raise MissingRepoNameError(f"url is missing a repository name: {raw}")

    *subs, repo_name = org.sub_organizations
    owner_org = OrganizationInfo(
        domain=org.domain,
        organization=org.organization,
        sub_organizations=tuple(subs),
    )

    owner: OrganizationInfo | UserInfo
    if is_organization:
        owner = owner_org
    else:
        owner = _org_to_user(owner_org, raw)

    return RepositoryRef(owner=owner, repository_name=repo_name)


def _org_to_user(org: OrganizationInfo, raw: str) -> UserInfo:
    # A user can't have sub-paths
    if org.sub_organizations:
        raise InvalidURLError(f"user urls cannot have sub-paths: {raw}")
    return UserInfo(domain=org.domain, user_login=org.organization)


__all__ = [
    "parse_organization_url",
    "parse_user_url",
    "parse_repository_url",
]
