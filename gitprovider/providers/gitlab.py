"""GitLab provider.

Talks to ``https://{domain}/api/v4``. Organizations are groups, with
subgroups as sub-organizations; teams are the subgroups of a group, and team
access is project sharing with a group.
"""

from typing import Any
from urllib.parse import quote as url_quote

from gitprovider.adapter import APIObject
from gitprovider.context import Context
from gitprovider.exceptions import NotFoundError
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

DEFAULT_DOMAIN = "gitlab.com"

_PROJECT_WRITABLE_FIELDS = ("name", "description", "default_branch", "visibility")

# GitLab access levels: guest, reporter, developer, maintainer, owner
_ACCESS_LEVELS = {
    RepositoryPermission.PULL: 10,
    RepositoryPermission.TRIAGE: 20,
    RepositoryPermission.PUSH: 30,
    RepositoryPermission.MAINTAIN: 40,
    RepositoryPermission.ADMIN: 50,
}
_PERMISSIONS = {level: permission for permission, level in _ACCESS_LEVELS.items()}


def api_base_url(domain: str) -> str:
    return f"https://{domain}/api/v4"


def _encode(path: str) -> str:
    """URL-encode a namespaced path for GitLab API."""
    return url_quote(path, safe="")


def _project_path(ref: RepositoryRef) -> str:
    return f"/projects/{_encode(f'{ref.identity}/{ref.repository_name}')}"


def _group_path(identity: str) -> str:
    return f"/groups/{_encode(identity)}"


def _require_dict(validator: Validator, obj: Any) -> None:
    if not isinstance(obj, dict):
        validator.invalid(obj)
        validator.raise_if_invalid(server_data=True)


def validate_project_api(obj: Any) -> APIObject:
    """
    Check a project object returned by GitLab.

    Raises:
        InvalidServerDataError: Listing every violation found
    """
    validator = Validator("GitLab.Project")
    _require_dict(validator, obj)
    for name in ("id", "path"):
        if obj.get(name) is None:
            validator.required(name)
    if obj.get("visibility") is not None:
        validator.check_enum(obj["visibility"], list(RepositoryVisibility), "visibility")
    for i, share in enumerate(obj.get("shared_with_groups") or []):
        if not isinstance(share, dict) or share.get("group_id") is None:
            validator.required("shared_with_groups", str(i), "group_id")
        elif share.get("group_access_level") not in _PERMISSIONS:
            validator.invalid(
                share.get("group_access_level"), "shared_with_groups", str(i), "group_access_level"
            )
    validator.raise_if_invalid(server_data=True)
    return obj


def validate_group_api(obj: Any) -> APIObject:
    validator = Validator("GitLab.Group")
    _require_dict(validator, obj)
    for name in ("id", "full_path"):
        if obj.get(name) is None:
            validator.required(name)
    validator.raise_if_invalid(server_data=True)
    return obj


def _validate_key_api(obj: Any) -> APIObject:
    validator = Validator("GitLab.DeployKey")
    _require_dict(validator, obj)
    for name in ("id", "title", "key"):
        if obj.get(name) is None:
            validator.required(name)
    validator.raise_if_invalid(server_data=True)
    return obj


class GitLabProjectAdapter:
    """Projects: ``/projects``, ``/groups/{group}/projects``, ``/users/{user}/projects``."""

    kind = "repository"
    settable_fields = ("description", "default_branch", "visibility")

    def __init__(self, transport: HTTPTransport) -> None:
        self.transport = transport

    def get(self, ctx: Context, ref: RepositoryRef) -> APIObject:
        obj = self.transport.request(ctx, "GET", _project_path(ref))
        return validate_project_api(obj)

    def list(self, ctx: Context, scope: OrganizationInfo | UserInfo) -> list[APIObject]:
        if isinstance(scope, OrganizationInfo):
            path = f"{_group_path(scope.identity)}/projects"
        else:
            path = f"/users/{_encode(scope.user_login)}/projects"
        return [validate_project_api(obj) for obj in self.transport.paginate(ctx, path)]

    def create(
        self,
        ctx: Context,
        ref: RepositoryRef,
        info: RepositoryInfo,
        options: RepositoryCreateOptions | None = None,
    ) -> APIObject:
        body: dict[str, Any] = {
            "name": ref.repository_name,
            "path": ref.repository_name,
            **self.to_api(info),
        }
        if isinstance(ref.owner, OrganizationInfo):
            group = validate_group_api(
                self.transport.request(ctx, "GET", _group_path(ref.owner.identity))
            )
            body["namespace_id"] = group["id"]
        # GitLab has no license templates
        if options is not None and options.auto_init is not None:
            body["initialize_with_readme"] = options.auto_init

        obj = self.transport.request(ctx, "POST", "/projects", body=body)
        return validate_project_api(obj)

    def update(self, ctx: Context, ref: RepositoryRef, body: APIObject) -> APIObject:
        payload = {k: body[k] for k in _PROJECT_WRITABLE_FIELDS if k in body}
        path = f"/projects/{body['id']}" if body.get("id") is not None else _project_path(ref)
        obj = self.transport.request(ctx, "PUT", path, body=payload)
        return validate_project_api(obj)

    def delete(self, ctx: Context, ref: RepositoryRef) -> None:
        self.transport.request(ctx, "DELETE", _project_path(ref))

    def from_api(self, obj: APIObject) -> RepositoryInfo:
        visibility = obj.get("visibility")
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
        return RepositoryRef(owner=scope, repository_name=obj["path"])


class GitLabDeployKeyAdapter:
    """Deploy keys: ``/projects/{project}/deploy_keys``, matched by title."""

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
        objs = self.transport.paginate(ctx, f"{_project_path(scope)}/deploy_keys")
        return [_validate_key_api(obj) for obj in objs]

    def create(
        self, ctx: Context, ref: SubResourceRef, info: DeployKeyInfo, options: Any | None = None
    ) -> APIObject:
        obj = self.transport.request(
            ctx, "POST", f"{_project_path(ref.repository)}/deploy_keys", body=self.to_api(info)
        )
        return _validate_key_api(obj)

    def update(self, ctx: Context, ref: SubResourceRef, body: APIObject) -> APIObject:
        current = self.get(ctx, ref)
        keys_path = f"{_project_path(ref.repository)}/deploy_keys"
        # Only title and can_push are editable; a new key means a new deploy key
        if canonical_public_key(body.get("key") or "") != canonical_public_key(current["key"]):
            self.transport.request(ctx, "DELETE", f"{keys_path}/{current['id']}")
            obj = self.transport.request(
                ctx,
                "POST",
                keys_path,
                body={k: body[k] for k in ("title", "key", "can_push") if k in body},
            )
        else:
            obj = self.transport.request(
                ctx,
                "PUT",
                f"{keys_path}/{current['id']}",
                body={k: body[k] for k in ("title", "can_push") if k in body},
            )
        return _validate_key_api(obj)

    def delete(self, ctx: Context, ref: SubResourceRef) -> None:
        key = self.get(ctx, ref)
        self.transport.request(
            ctx, "DELETE", f"{_project_path(ref.repository)}/deploy_keys/{key['id']}"
        )

    def from_api(self, obj: APIObject) -> DeployKeyInfo:
        can_push = obj.get("can_push")
        return DeployKeyInfo(
            name=obj["title"],
            key=canonical_public_key(obj["key"]),
            read_only=None if can_push is None else not can_push,
        )

    def to_api(self, info: DeployKeyInfo) -> APIObject:
        obj: APIObject = {"title": info.name, "key": info.key}
        if info.read_only is not None:
            obj["can_push"] = not info.read_only
        return obj

    def ref_from_api(self, scope: RepositoryRef, obj: APIObject) -> SubResourceRef:
        return SubResourceRef(repository=scope, name=obj["title"])


class GitLabTeamAccessAdapter:
    """Team access through project sharing: ``/projects/{project}/share``.

    The team name is the full path of the group the project is shared with.
    """

    kind = "team_access"
    settable_fields = ("permission",)

    def __init__(self, transport: HTTPTransport) -> None:
        self.transport = transport

    def get(self, ctx: Context, ref: SubResourceRef) -> APIObject:
        for obj in self.list(ctx, ref.repository):
            if obj["name"] == ref.name:
                return obj
        raise NotFoundError(
            "NOT_FOUND", f"project {ref.repository} is not shared with group {ref.name!r}"
        )

    def list(self, ctx: Context, scope: RepositoryRef) -> list[APIObject]:
        project = validate_project_api(self.transport.request(ctx, "GET", _project_path(scope)))
        return [
            {
                "name": share.get("group_full_path") or share.get("group_name"),
                "group_id": share["group_id"],
                "permission": _PERMISSIONS[share["group_access_level"]].value,
            }
            for share in project.get("shared_with_groups") or []
        ]

    def create(
        self, ctx: Context, ref: SubResourceRef, info: TeamAccessInfo, options: Any | None = None
    ) -> APIObject:
        return self._share(ctx, ref, self.to_api(info).get("permission"))

    def update(self, ctx: Context, ref: SubResourceRef, body: APIObject) -> APIObject:
        # Shares can't be edited; drop and share again
        self.delete(ctx, ref)
        return self._share(ctx, ref, body.get("permission"))

    def delete(self, ctx: Context, ref: SubResourceRef) -> None:
        share = self.get(ctx, ref)
        self.transport.request(
            ctx, "DELETE", f"{_project_path(ref.repository)}/share/{share['group_id']}"
        )

    def from_api(self, obj: APIObject) -> TeamAccessInfo:
        permission = obj.get("permission")
        return TeamAccessInfo(
            name=obj["name"],
            permission=RepositoryPermission(permission) if permission else None,
        )

    def to_api(self, info: TeamAccessInfo) -> APIObject:
        obj: APIObject = {"name": info.name}
        if info.permission is not None:
            obj["permission"] = RepositoryPermission(info.permission).value
        return obj

    def ref_from_api(self, scope: RepositoryRef, obj: APIObject) -> SubResourceRef:
        return SubResourceRef(repository=scope, name=obj["name"])

    def _share(self, ctx: Context, ref: SubResourceRef, permission: str | None) -> APIObject:
        group = validate_group_api(self.transport.request(ctx, "GET", _group_path(ref.name)))
        level = _ACCESS_LEVELS[RepositoryPermission(permission or DEFAULT_TEAM_PERMISSION)]
        self.transport.request(
            ctx,
            "POST",
            f"{_project_path(ref.repository)}/share",
            body={"group_id": group["id"], "group_access": level},
        )
        return self.get(ctx, ref)


class GitLabGroupAdapter:
    """Groups and subgroups: ``/groups``."""

    def __init__(self, transport: HTTPTransport, domain: str) -> None:
        self.transport = transport
        self.domain = domain

    def get(self, ctx: Context, ref: OrganizationInfo) -> Organization:
        obj = self.transport.request(ctx, "GET", _group_path(ref.identity))
        return self._organization(validate_group_api(obj))

    def children(self, ctx: Context, ref: OrganizationInfo) -> list[Organization]:
        objs = self.transport.paginate(
            ctx, f"{_group_path(ref.identity)}/subgroups", params={"all_available": "true"}
        )
        return [self._organization(validate_group_api(obj)) for obj in objs]

    def list(self, ctx: Context) -> list[Organization]:
        objs = self.transport.paginate(
            ctx, "/groups", params={"top_level_only": "true", "all_available": "true"}
        )
        return [self._organization(validate_group_api(obj)) for obj in objs]

    def _organization(self, obj: APIObject) -> Organization:
        organization, *subs = obj["full_path"].split("/")
        return Organization(
            ref=OrganizationInfo(
                domain=self.domain, organization=organization, sub_organizations=tuple(subs)
            ),
            name=obj.get("name"),
            description=obj.get("description"),
        )


class GitLabTeamAdapter:
    """Teams are the subgroups of a group; members come from ``/groups/{group}/members``."""

    def __init__(self, transport: HTTPTransport) -> None:
        self.transport = transport

    def get(self, ctx: Context, org: OrganizationInfo, name: str) -> Team:
        group = validate_group_api(
            self.transport.request(ctx, "GET", _group_path(f"{org.identity}/{name}"))
        )
        return self._team(ctx, org, group)

    def list(self, ctx: Context, org: OrganizationInfo) -> list[Team]:
        groups = self.transport.paginate(
            ctx, f"{_group_path(org.identity)}/subgroups", params={"all_available": "true"}
        )
        return [self._team(ctx, org, validate_group_api(group)) for group in groups]

    def _team(self, ctx: Context, org: OrganizationInfo, group: APIObject) -> Team:
        members = self.transport.paginate(ctx, f"{_group_path(group['full_path'])}/members")
        return Team(
            organization=org,
            name=group["full_path"].rsplit("/", 1)[-1],
            members=[m["username"] for m in members if isinstance(m, dict) and m.get("username")],
        )


class GitLabProvider:
    """The GitLab adapters bound to one domain."""

    name = "gitlab"

    def __init__(self, transport: HTTPTransport, domain: str = DEFAULT_DOMAIN) -> None:
        self.transport = transport
        self.domain = domain
        self.repositories = GitLabProjectAdapter(transport)
        self.deploy_keys = GitLabDeployKeyAdapter(transport)
        self.team_access = GitLabTeamAccessAdapter(transport)
        self.organizations = GitLabGroupAdapter(transport, domain)
        self.teams = GitLabTeamAdapter(transport)

    def close(self) -> None:
        self.transport.close()
