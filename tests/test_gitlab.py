"""
Tests for the GitLab provider over a mock HTTP transport.

Feature: gitprovider
"""

import json

import pytest

from gitprovider import Client
from gitprovider.exceptions import InvalidServerDataError
from gitprovider.providers.gitlab import GitLabProvider, api_base_url
from gitprovider.refs import OrganizationInfo, RepositoryRef, UserInfo
from gitprovider.types.repos import (
    DeployKeyInfo,
    RepositoryCreateOptions,
    RepositoryInfo,
    RepositoryPermission,
    RepositoryVisibility,
    TeamAccessInfo,
)
from gitprovider.urls import parse_repository_url

REF = parse_repository_url("https://gitlab.com/fluxcd/engineering/frontend", is_organization=True)
PROJECT_PATH = "/api/v4/projects/fluxcd%2Fengineering%2Ffrontend"
PROJECT = {
    "id": 42,
    "path": "frontend",
    "name": "frontend",
    "description": "UI",
    "default_branch": "main",
    "visibility": "private",
    "star_count": 3,
}


def gitlab_client(router) -> Client:
    return Client(GitLabProvider(router.transport(api_base_url("gitlab.com")), "gitlab.com"))


def body_of(request) -> dict:
    return json.loads(request.content)


def shared(level: int) -> dict:
    return {
        **PROJECT,
        "shared_with_groups": [
            {"group_id": 10, "group_name": "dev", "group_full_path": "fluxcd/dev", "group_access_level": level}
        ],
    }


class TestProjects:
    """Tests for GitLab projects."""

    def test_reconcile_updates_by_id(self, router) -> None:
        router.add("GET", PROJECT_PATH, json=PROJECT)
        router.add("PUT", "/api/v4/projects/42", json={**PROJECT, "visibility": "internal"})
        client = gitlab_client(router)

        repo, action_taken = client.org_repositories.reconcile(
            REF, RepositoryInfo(visibility=RepositoryVisibility.INTERNAL)
        )

        assert action_taken
        (put,) = router.calls("PUT")
        assert body_of(put) == {
            "name": "frontend",
            "description": "UI",
            "default_branch": "main",
            "visibility": "internal",
        }
        assert repo.get().visibility == RepositoryVisibility.INTERNAL

    def test_reconcile_in_sync(self, router) -> None:
        router.add("GET", PROJECT_PATH, json=PROJECT)

        _, action_taken = gitlab_client(router).org_repositories.reconcile(
            REF, RepositoryInfo(description="UI", default_branch="main")
        )

        assert not action_taken
        assert [r.method for r in router.requests] == ["GET"]

    def test_reconcile_empty_description_matches_null(self, router) -> None:
        router.add("GET", PROJECT_PATH, json={**PROJECT, "description": None})
        repo = gitlab_client(router).org_repositories.get(REF)
        repo.set(RepositoryInfo(description=""))

        actions = [repo.reconcile() for _ in range(3)]

        assert actions == [False, False, False]
        assert router.calls("PUT") == []

    def test_create_in_subgroup(self, router) -> None:
        router.add("GET", "/api/v4/groups/fluxcd%2Fengineering", json={"id": 9, "full_path": "fluxcd/engineering"})
        router.add("POST", "/api/v4/projects", status_code=201, json=PROJECT)
        client = gitlab_client(router)

        _, action_taken = client.org_repositories.reconcile(
            REF,
            RepositoryInfo(description="UI", visibility=RepositoryVisibility.PRIVATE),
            RepositoryCreateOptions(auto_init=True),
        )

        assert action_taken
        (post,) = router.calls("POST")
        assert body_of(post) == {
            "name": "frontend",
            "path": "frontend",
            "description": "UI",
            "visibility": "private",
            "namespace_id": 9,
            "initialize_with_readme": True,
        }

    def test_create_user_project(self, router) -> None:
        router.add("POST", "/api/v4/projects", status_code=201, json={**PROJECT, "path": "dotfiles"})
        ref = RepositoryRef(UserInfo("gitlab.com", "octocat"), "dotfiles")

        gitlab_client(router).user_repositories.create(ref, RepositoryInfo())

        (post,) = router.calls("POST")
        assert "namespace_id" not in body_of(post)
        assert router.calls("GET") == []

    def test_list_group_projects(self, router) -> None:
        router.add("GET", "/api/v4/groups/fluxcd%2Fengineering/projects", json=[PROJECT])

        repos = gitlab_client(router).org_repositories.list(REF.owner)

        assert [r.ref for r in repos] == [REF]

    def test_invalid_share_level(self, router) -> None:
        router.add("GET", PROJECT_PATH, json=shared(35))

        with pytest.raises(InvalidServerDataError):
            gitlab_client(router).org_repositories.get(REF)


class TestGroups:
    """Tests for GitLab groups and subgroups."""

    def test_get_and_children(self, router) -> None:
        router.add("GET", "/api/v4/groups/fluxcd", json={"id": 1, "full_path": "fluxcd", "name": "Flux"})
        router.add(
            "GET",
            "/api/v4/groups/fluxcd/subgroups",
            json=[{"id": 9, "full_path": "fluxcd/engineering", "name": "Engineering"}],
        )
        client = gitlab_client(router)
        root = OrganizationInfo("gitlab.com", "fluxcd")

        assert client.organizations.get(root).name == "Flux"
        (child,) = client.organizations.children(root)
        assert child.ref == OrganizationInfo("gitlab.com", "fluxcd", ("engineering",))

    def test_list_top_level(self, router) -> None:
        router.add("GET", "/api/v4/groups", json=[{"id": 1, "full_path": "fluxcd"}])

        orgs = gitlab_client(router).organizations.list()

        assert [o.ref.identity for o in orgs] == ["fluxcd"]
        assert router.requests[0].url.params["top_level_only"] == "true"

    def test_teams_are_subgroups(self, router) -> None:
        router.add("GET", "/api/v4/groups/fluxcd/subgroups", json=[{"id": 10, "full_path": "fluxcd/dev"}])
        router.add("GET", "/api/v4/groups/fluxcd%2Fdev/members", json=[{"username": "alice"}])

        (team,) = gitlab_client(router).teams.list(OrganizationInfo("gitlab.com", "fluxcd"))

        assert team.name == "dev"
        assert team.members == ["alice"]


class TestTeamAccess:
    """Tests for GitLab group sharing."""

    def test_reconcile_reshares_with_new_level(self, router) -> None:
        for level in (30, 30, 30, 40):
            router.add("GET", PROJECT_PATH, json=shared(level))
        router.add("DELETE", f"{PROJECT_PATH}/share/10", status_code=204)
        router.add("GET", "/api/v4/groups/fluxcd%2Fdev", json={"id": 10, "full_path": "fluxcd/dev"})
        router.add("POST", f"{PROJECT_PATH}/share", status_code=201, json={})
        repo = gitlab_client(router).org_repositories.get(REF)

        access, action_taken = repo.team_access.reconcile(
            TeamAccessInfo(name="fluxcd/dev", permission=RepositoryPermission.MAINTAIN)
        )

        assert action_taken
        (post,) = router.calls("POST")
        assert body_of(post) == {"group_id": 10, "group_access": 40}
        assert len(router.calls("DELETE")) == 1
        assert access.get().permission == RepositoryPermission.MAINTAIN

    def test_create_without_permission_grants_pull(self, router) -> None:
        router.add("GET", PROJECT_PATH, json=shared(10))
        router.add("GET", "/api/v4/groups/fluxcd%2Fdev", json={"id": 10, "full_path": "fluxcd/dev"})
        router.add("POST", f"{PROJECT_PATH}/share", status_code=201, json={})
        repo = gitlab_client(router).org_repositories.get(REF)

        access = repo.team_access.create(TeamAccessInfo(name="fluxcd/dev"))

        (post,) = router.calls("POST")
        assert body_of(post) == {"group_id": 10, "group_access": 10}
        assert access.get().permission == RepositoryPermission.PULL

    def test_list(self, router) -> None:
        router.add("GET", PROJECT_PATH, json=shared(10))
        repo = gitlab_client(router).org_repositories.get(REF)

        (access,) = repo.team_access.list()

        assert access.ref.name == "fluxcd/dev"
        assert access.get().permission == RepositoryPermission.PULL


class TestDeployKeys:
    """Tests for GitLab deploy keys."""

    KEY = {"id": 3, "title": "flux-sync", "key": "ssh-ed25519 AAAA", "can_push": False}

    def test_same_key_updated_in_place(self, router) -> None:
        router.add("GET", PROJECT_PATH, json=PROJECT)
        router.add("GET", f"{PROJECT_PATH}/deploy_keys", json=[self.KEY])
        router.add("PUT", f"{PROJECT_PATH}/deploy_keys/3", json={**self.KEY, "can_push": True})
        repo = gitlab_client(router).org_repositories.get(REF)

        key, action_taken = repo.deploy_keys.reconcile(
            DeployKeyInfo(name="flux-sync", key="ssh-ed25519 AAAA", read_only=False)
        )

        assert action_taken
        (put,) = router.calls("PUT")
        assert body_of(put) == {"title": "flux-sync", "can_push": True}
        assert key.get().read_only is False
        assert router.calls("DELETE") == []

    def test_new_key_replaces_old(self, router) -> None:
        router.add("GET", PROJECT_PATH, json=PROJECT)
        router.add("GET", f"{PROJECT_PATH}/deploy_keys", json=[self.KEY])
        router.add("DELETE", f"{PROJECT_PATH}/deploy_keys/3", status_code=204)
        router.add("POST", f"{PROJECT_PATH}/deploy_keys", status_code=201, json={**self.KEY, "id": 4, "key": "ssh-ed25519 BBBB"})
        repo = gitlab_client(router).org_repositories.get(REF)

        key, action_taken = repo.deploy_keys.reconcile(
            DeployKeyInfo(name="flux-sync", key="ssh-ed25519 BBBB")
        )

        assert action_taken
        (post,) = router.calls("POST")
        assert body_of(post) == {"title": "flux-sync", "key": "ssh-ed25519 BBBB", "can_push": False}
        assert key.api_object["id"] == 4

    def test_key_comment_is_not_a_change(self, router) -> None:
        router.add("GET", PROJECT_PATH, json=PROJECT)
        router.add("GET", f"{PROJECT_PATH}/deploy_keys", json=[self.KEY])
        repo = gitlab_client(router).org_repositories.get(REF)
        desired = DeployKeyInfo(name="flux-sync", key="ssh-ed25519 AAAA flux@cluster", read_only=True)

        _, action_taken = repo.deploy_keys.reconcile(desired)

        assert not action_taken
        assert router.calls("PUT") == []
        assert router.calls("DELETE") == []
