"""GitHub provider.

Talks to ``api.github.com``, or ``https://{domain}/api/v3`` for GitHub
Enterprise. GitHub has no sub-organizations, and deploy keys can't be edited
in place, so key updates are a delete followed by a create.
"""

from typing import Any

from gitprovider.adapter import APIObject
from gitprovider.context import Context
from gitprovider.exceptions import NoProviderSupportError, NotFoundError
from gitprovider.refs import OrganizationInfo, RepositoryRef, SubResourceRef, UserInfo
from gitprovider.transport import HTTPTransport
from gitprovider.types.organizations import Organization, Team
from gitprovider.types.repos import (
    DEFAULT_TEAM_PERMISSION,
    DeployKeyInfo,
    RepositoryCreateOptions,
    RepositoryInfo,
    RepositoryPermission,
    RepositoryVisibility,
    TeamAccessInfo,
    canonical_public_key,
)
from gitprovider.validation import Validator

DEFAULT_DOMAIN = "github.com"

# Fields PATCH /repos/{owner}/{repo} accepts; "private" is left out as
# "visibility" supersedes it
_REPOSITORY_WRITABLE_FIELDS = (
    "name",
    "description",
    "homepage",
    "visibility",
    "default_branch",
    "has_issues",
    "has_projects",
    "has_wiki",
    "archived",
)

# Highest permission first
_PERMISSION_ORDER = (
    RepositoryPermission.ADMIN,
    RepositoryPermission.MAINTAIN,
    RepositoryPermission.PUSH,
    RepositoryPermission.TRIAGE,
    RepositoryPermission.PULL,
)


def api_base_url(domain: str) -> str:
    """Resolve the REST API base URL for a GitHub domain."""
    if domain == DEFAULT_DOMAIN:
        return "https://api.github.com"
    return f"https://{domain}/api/v3"


def get_permission_from_map(permissions: dict[str, bool]) -> RepositoryPermission | None:
    """
    Pick the highest permission set to true in a GitHub permissions map.

    Unknown keys are ignored; None is returned when no known permission is
    granted.
    """
    for permission in _PERMISSION_ORDER:
        if permissions.get(permission.value):
            return permission
    return None


def validate_repository_api(obj: Any) -> APIObject:
    """
    Check a repository object returned by GitHub.

    Raises:
        InvalidServerDataError: Listing every violation found
    """
    validator = Validator("GitHub.Repository")
    if not isinstance(obj, dict):
        validator.invalid(obj)
        validator.raise_if_invalid(server_data=True)
    if not obj.get("name"):
        validator.required("name")
    if obj.get("visibility") is not None:
        validator.check_enum(obj["visibility"], list(RepositoryVisibility), "visibility")
    validator.raise_if_invalid(server_data=True)
    return obj


def _validate_key_api(obj: Any) -> APIObject:
    validator = Validator("GitHub.Key")
    if not isinstance(obj, dict):
        validator.invalid(obj)
        validator.raise_if_invalid(server_data=True)
    for name in ("id", "title", "key"):
        if obj.get(name) is None:
            validator.required(name)
    validator.raise_if_invalid(server_data=True)
    return obj


def _validate_team_api(obj: Any) -> APIObject:
    validator = Validator("GitHub.Team")
    if not isinstance(obj, dict):
        validator.invalid(obj)
        validator.raise_if_invalid(server_data=True)
    if not obj.get("slug"):
        validator.required("slug")
    if obj.get("permission") is not None:
        validator.check_enum(obj["permission"], list(RepositoryPermission), "permission")
    validator.raise_if_invalid(server_data=True)
    return obj


def _repo_path(ref: RepositoryRef) -> str:
    return f"/repos/{ref.identity}/{ref.repository_name}"


class GitHubRepositoryAdapter:
    """Repositories: ``/repos``, ``/orgs/{org}/repos``, ``/users/{user}/repos``."""

    kind = "repository"
    settable_fields = ("description", "default_branch", "visibility")

    def __init__(self, transport: HTTPTransport) -> None:
        self.transport = transport

    def get(self, ctx: Context, ref: RepositoryRef) -> APIObject:
        # GET /repos/{owner}/{repo}
        obj = self.transport.request(ctx, "GET", _repo_path(ref))
        return validate_repository_api(obj)

    def list(self, ctx: Context, scope: OrganizationInfo | UserInfo) -> list[APIObject]:
        if isinstance(scope, OrganizationInfo):
            path = f"/orgs/{scope.organization}/repos"
        else:
            path = f"/users/{scope.user_login}/repos"
        return [validate_repository_api(obj) for obj in self.transport.paginate(ctx, path)]

    def create(
        self,
        ctx: Context,
        ref: RepositoryRef,
        info: RepositoryInfo,
        options: RepositoryCreateOptions | None = None,
    ) -> APIObject:
        body: dict[str, Any] = {"name": ref.repository_name, **self.to_api(info)}
        if options is not None:
            if options.auto_init is not None:
                body["auto_init"] = options.auto_init
            if options.license_template is not None:
                body["license_template"] = options.license_template.value

        # The authenticated user's repositories are created through /user/repos
        if isinstance(ref.owner, OrganizationInfo):
            path = f"/orgs/{ref.owner.organization}/repos"
        else:
            path = "/user/repos"
        obj = self.transport.request(ctx, "POST", path, body=body)
        return validate_repository_api(obj)

    def update(self, ctx: Context, ref: RepositoryRef, body: APIObject) -> APIObject:
        patch = {k: body[k] for k in _REPOSITORY_WRITABLE_FIELDS if k in body}
        # PATCH /repos/{owner}/{repo}
        obj = self.transport.request(ctx, "PATCH", _repo_path(ref), body=patch)
        return validate_repository_api(obj)

    def delete(self, ctx: Context, ref: RepositoryRef) -> None:
        self.transport.request(ctx, "DELETE", _repo_path(ref))

    def from_api(self, obj: APIObject) -> RepositoryInfo:
        visibility = obj.get("visibility")
        if visibility is None and obj.get("private") is not None:
            visibility = "private" if obj["private"] else "public"
        return RepositoryInfo(
            description=obj.get("description") or "",
            default_branch=obj.get("default_branch"),
            visibility=RepositoryVisibility(visibility) if visibility else None,
        )

    def to_api(self, info: RepositoryInfo) -> APIObject:
        obj: APIObject = {}
        if info.description is not None:
            obj["description"] = info.description
        if info.default_branch is not None:
            obj["default_branch"] = info.default_branch
        if info.visibility is not None:
            obj["visibility"] = RepositoryVisibility(info.visibility).value
        return obj

    def ref_from_api(self, scope: OrganizationInfo | UserInfo, obj: APIObject) -> RepositoryRef:
        return RepositoryRef(owner=scope, repository_name=obj["name"])


class GitHubDeployKeyAdapter:
    """Deploy keys: ``/repos/{owner}/{repo}/keys``, matched by title."""

    kind = "deploy_key"
    settable_fields = ("key", "read_only")

    def __init__(self, transport: HTTPTransport) -> None:
        self.transport = transport

    def get(self, ctx: Context, ref: SubResourceRef) -> APIObject:
        for obj in self.list(ctx, ref.repository):
            if obj["title"] == ref.name:
                return obj
        raise NotFoundError("NOT_FOUND", f"deploy key {ref.name!r} not found on {ref.repository}")

    def list(self, ctx: Context, scope: RepositoryRef) -> list[APIObject]:
        objs = self.transport.paginate(ctx, f"{_repo_path(scope)}/keys")
        return [_validate_key_api(obj) for obj in objs]

    def create(
        self, ctx: Context, ref: SubResourceRef, info: DeployKeyInfo, options: Any | None = None
    ) -> APIObject:
        obj = self.transport.request(
            ctx, "POST", f"{_repo_path(ref.repository)}/keys", body=self.to_api(info)
        )
        return _validate_key_api(obj)

    def update(self, ctx: Context, ref: SubResourceRef, body: APIObject) -> APIObject:
        # Keys are immutable on GitHub
        self.delete(ctx, ref)
        obj = self.transport.request(
            ctx,
            "POST",
            f"{_repo_path(ref.repository)}/keys",
            body={k: body[k] for k in ("title", "key", "read_only") if k in body},
        )
        return _validate_key_api(obj)

    def delete(self, ctx: Context, ref: SubResourceRef) -> None:
        key = self.get(ctx, ref)
        self.transport.request(ctx, "DELETE", f"{_repo_path(ref.repository)}/keys/{key['id']}")

    def from_api(self, obj: APIObject) -> DeployKeyInfo:
        return DeployKeyInfo(
            name=obj["title"],
            key=canonical_public_key(obj["key"]),
            read_only=obj.get("read_only"),
        )

    def to_api(self, info: DeployKeyInfo) -> APIObject:
        obj: APIObject = {"title": info.name, "key": info.key}
        if info.read_only is not None:
            obj["read_only"] = info.read_only
        return obj

    def ref_from_api(self, scope: RepositoryRef, obj: APIObject) -> SubResourceRef:
        return SubResourceRef(repository=scope, name=obj["title"])


class GitHubTeamAccessAdapter:
    """Team access: ``/orgs/{org}/teams/{team}/repos/{owner}/{repo}``."""

    kind = "team_access"
    settable_fields = ("permission",)

    def __init__(self, transport: HTTPTransport) -> None:
        self.transport = transport

    def get(self, ctx: Context, ref: SubResourceRef) -> APIObject:
        # Answers with the repository, including the team's permissions map
        repo = self.transport.request(
            ctx,
            "GET",
            self._path(ref),
            headers={"Accept": "application/vnd.github.v3.repository+json"},
        )
        validate_repository_api(repo)
        permission = get_permission_from_map(repo.get("permissions") or {})
        return _validate_team_api(
            {
                "slug": ref.name,
                "name": ref.name,
                "permission": permission.value if permission else None,
            }
        )

    def list(self, ctx: Context, scope: RepositoryRef) -> list[APIObject]:
        objs = self.transport.paginate(ctx, f"{_repo_path(scope)}/teams")
        return [_validate_team_api(obj) for obj in objs]

    def create(
        self, ctx: Context, ref: SubResourceRef, info: TeamAccessInfo, options: Any | None = None
    ) -> APIObject:
        return self._put(ctx, ref, self.to_api(info))

    def update(self, ctx: Context, ref: SubResourceRef, body: APIObject) -> APIObject:
        return self._put(ctx, ref, body)

    def delete(self, ctx: Context, ref: SubResourceRef) -> None:
        self.transport.request(ctx, "DELETE", self._path(ref))

    def from_api(self, obj: APIObject) -> TeamAccessInfo:
        permission = obj.get("permission")
        return TeamAccessInfo(
            name=obj.get("slug") or obj["name"],
            permission=RepositoryPermission(permission) if permission else None,
        )

    def to_api(self, info: TeamAccessInfo) -> APIObject:
        obj: APIObject = {"slug": info.name}
        if info.permission is not None:
            obj["permission"] = RepositoryPermission(info.permission).value
        return obj

    def ref_from_api(self, scope: RepositoryRef, obj: APIObject) -> SubResourceRef:
        return SubResourceRef(repository=scope, name=obj["slug"])

    def _put(self, ctx: Context, ref: SubResourceRef, body: APIObject) -> APIObject:
        # GitHub would grant push when no permission is sent
        permission = RepositoryPermission(body.get("permission") or DEFAULT_TEAM_PERMISSION)
        payload = {"permission": permission.value}
        # PUT answers 204 No Content
        self.transport.request(ctx, "PUT", self._path(ref), body=payload)
        return self.get(ctx, ref)

    def _path(self, ref: SubResourceRef) -> str:
        repo = ref.repository
        org = repo.owner.organization if isinstance(repo.owner, OrganizationInfo) else repo.identity
        return f"/orgs/{org}/teams/{ref.name}/repos/{repo.identity}/{repo.repository_name}"


class GitHubOrganizationAdapter:
    """Organizations: ``/orgs/{org}`` and ``/user/orgs``."""

    def __init__(self, transport: HTTPTransport, domain: str) -> None:
        self.transport = transport
        self.domain = domain

    def get(self, ctx: Context, ref: OrganizationInfo) -> Organization:
        if ref.sub_organizations:
            raise NoProviderSupportError("GitHub has no sub-organizations")
        obj = self.transport.request(ctx, "GET", f"/orgs/{ref.organization}")
        return self._organization(obj)

    def children(self, ctx: Context, ref: OrganizationInfo) -> list[Organization]:
        raise NoProviderSupportError("GitHub has no sub-organizations")

    def list(self, ctx: Context) -> list[Organization]:
        return [self._organization(obj) for obj in self.transport.paginate(ctx, "/user/orgs")]

    def _organization(self, obj: Any) -> Organization:
        validator = Validator("GitHub.Organization")
        if not isinstance(obj, dict):
            validator.invalid(obj)
            validator.raise_if_invalid(server_data=True)
        if not obj.get("login"):
            validator.required("login")
        validator.raise_if_invalid(server_data=True)
        return Organization(
            ref=OrganizationInfo(domain=self.domain, organization=obj["login"]),
            name=obj.get("name"),
            description=obj.get("description"),
        )


class GitHubTeamAdapter:
    """Teams: ``/orgs/{org}/teams`` and their members."""

    def __init__(self, transport: HTTPTransport) -> None:
        self.transport = transport

    def get(self, ctx: Context, org: OrganizationInfo, name: str) -> Team:
        obj = _validate_team_api(
            self.transport.request(ctx, "GET", f"/orgs/{org.organization}/teams/{name}")
        )
        return self._team(ctx, org, obj)

    def list(self, ctx: Context, org: OrganizationInfo) -> list[Team]:
        objs = self.transport.paginate(ctx, f"/orgs/{org.organization}/teams")
        return [self._team(ctx, org, _validate_team_api(obj)) for obj in objs]

    def _team(self, ctx: Context, org: OrganizationInfo, obj: APIObject) -> Team:
        members = self.transport.paginate(
            ctx, f"/orgs/{org.organization}/teams/{obj['slug']}/members"
        )
        return Team(
            organization=org,
            name=obj["slug"],
            members=[m["login"] for m in members if isinstance(m, dict) and m.get("login")],
        )


class GitHubProvider:
    """The GitHub adapters bound to one domain."""

    name = "github"

    def __init__(self, transport: HTTPTransport, domain: str = DEFAULT_DOMAIN) -> None:
        self.transport = transport
        self.domain = domain
        self.repositories = GitHubRepositoryAdapter(transport)
        self.deploy_keys = GitHubDeployKeyAdapter(transport)
        self.team_access = GitHubTeamAccessAdapter(transport)
        self.organizations = GitHubOrganizationAdapter(transport, domain)
        self.teams = GitHubTeamAdapter(transport)

    def close(self) -> None:
        self.transport.close()
