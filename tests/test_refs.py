"""Tests for identity and repository references."""

import pytest

from gitprovider.exceptions import ValidationError
from gitprovider.refs import (
    IdentityRef,
    IdentityType,
    OrganizationInfo,
    RepositoryRef,
    SubResourceRef,
    TransportType,
    UserInfo,
    get_clone_url,
)
from gitprovider.validation import Validator, validate_target


class TestIdentityRefs:
    """Tests for UserInfo and OrganizationInfo."""

    def test_organization_identity(self) -> None:
        org = OrganizationInfo("gitlab.com", "fluxcd", ["engineering", "frontend"])

        assert org.sub_organizations == ("engineering", "frontend")
        assert org.identity == "fluxcd/engineering/frontend"
        assert org.identity_type == IdentityType.SUBORGANIZATION
        assert str(org) == "https://gitlab.com/fluxcd/engineering/frontend"

    def test_user_identity(self) -> None:
        user = UserInfo("github.com", "octocat")

        assert user.identity == "octocat"
        assert user.identity_type == IdentityType.USER
        assert str(user) == "https://github.com/octocat"

    def test_identity_ref_protocol(self) -> None:
        assert isinstance(UserInfo("github.com", "octocat"), IdentityRef)
        assert isinstance(OrganizationInfo("github.com", "fluxcd"), IdentityRef)

    def test_is_empty(self) -> None:
        assert UserInfo("", "").is_empty()
        assert OrganizationInfo("", "").is_empty()
        assert not UserInfo("github.com", "").is_empty()
        assert not OrganizationInfo("", "", ("sub",)).is_empty()

    def test_refs_are_hashable_values(self) -> None:
        a = OrganizationInfo("gitlab.com", "fluxcd", ["engineering"])
        b = OrganizationInfo("gitlab.com", "fluxcd", ("engineering",))

        assert a == b
        assert {a: 1}[b] == 1

    def test_validate_fields_reports_every_missing_field(self) -> None:
        validator = Validator("OrganizationInfo")
        OrganizationInfo("", "", ("ok", "")).validate_fields(validator)

        assert len(validator.errors) == 3
        with pytest.raises(ValidationError) as exc_info:
            validator.raise_if_invalid()
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert len(exc_info.value.errors) == 3


class TestRepositoryRef:
    """Tests for RepositoryRef."""

    def test_git_suffix_stripped_at_construction(self) -> None:
        ref = RepositoryRef(UserInfo("github.com", "octocat"), "hello-world.git")

        assert ref.repository_name == "hello-world"

    def test_delegates_to_owner(self) -> None:
        owner = OrganizationInfo("gitlab.com", "fluxcd", ("engineering",))
        ref = RepositoryRef(owner, "frontend")

        assert ref.domain == "gitlab.com"
        assert ref.identity == "fluxcd/engineering"
        assert ref.identity_type == IdentityType.SUBORGANIZATION
        assert ref.is_organization
        assert str(ref) == "https://gitlab.com/fluxcd/engineering/frontend"

    def test_clone_urls(self) -> None:
        ref = RepositoryRef(UserInfo("github.com", "octocat"), "hello-world")

        assert get_clone_url(ref, TransportType.HTTPS) == "https://github.com/octocat/hello-world.git"
        assert get_clone_url(ref, TransportType.GIT) == "git@github.com:octocat/hello-world.git"
        assert get_clone_url(ref, TransportType.SSH) == "ssh://git@github.com/octocat/hello-world"
        assert get_clone_url(ref, "ssh") == "ssh://git@github.com/octocat/hello-world"

    def test_unknown_transport_gives_empty_url(self) -> None:
        ref = RepositoryRef(UserInfo("github.com", "octocat"), "hello-world")

        assert get_clone_url(ref, "ftp") == ""
        assert ref.get_clone_url("") == ""

    def test_is_empty(self) -> None:
        assert RepositoryRef(UserInfo("", ""), "").is_empty()
        assert not RepositoryRef(UserInfo("", ""), "repo").is_empty()

    def test_validate_fields(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_target("RepositoryRef", RepositoryRef(UserInfo("github.com", ""), ""))

        assert exc_info.value.errors == [
            "RepositoryRef.user_login: field is required",
            "RepositoryRef.repository_name: field is required",
        ]


def test_sub_resource_ref() -> None:
    repo = RepositoryRef(OrganizationInfo("github.com", "fluxcd"), "flux2")
    ref = SubResourceRef(repo, "flux-sync")

    assert ref.domain == "github.com"
    assert str(ref) == "https://github.com/fluxcd/flux2[flux-sync]"

    validator = Validator("SubResourceRef")
    SubResourceRef(repo, "").validate_fields(validator)
    assert validator.errors == ["SubResourceRef.name: field is required"]
