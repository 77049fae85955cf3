"""Desired-state reconciliation.

A ``Resource`` handle pairs a reference with two pieces of state it owns
exclusively: the desired descriptor (replaced through ``set()``) and a
snapshot of the last server representation (replaced wholesale after every
successful ``get``, ``update`` or ``reconcile``). A failed call leaves both
untouched.

Handles are not thread-safe: one handle must have a single writer at a time.
"""

import copy
import dataclasses
from collections.abc import Iterable
from enum import Enum
from typing import Any, Generic, TypeVar

from gitprovider.adapter import APIObject, ClientContext, ResourceAdapter
from gitprovider.context import Context, ensure_context
from gitprovider.exceptions import (
    DestructiveActionDisallowedError,
    GitProviderError,
    NotFoundError,
)
from gitprovider.logging import log_reconcile_action

RefT = TypeVar("RefT")
InfoT = TypeVar("InfoT")


class ReconcileState(str, Enum):
    """Where a resource handle is in its fetch/create/update cycle."""

    UNKNOWN = "unknown"
    FETCHING = "fetching"
    CREATING = "creating"
    UPDATING = "updating"
    IN_SYNC = "in_sync"
    FAILED = "failed"


def settable_fields_equal(desired: Any, actual: Any, fields: Iterable[str]) -> bool:
    """
    Compare two descriptors over the settable fields only.

    Fields left unset (None) in ``desired`` don't take part: the caller has
    no opinion about them, so whatever the server holds is fine.

    Args:
        desired: Desired descriptor
        actual: Descriptor projected from the server object
        fields: Names of the settable fields

    Returns:
        True if every set desired field equals the actual value
    """
    for name in fields:
        want = getattr(desired, name)
        if want is None:
            continue
        if want != getattr(actual, name):
            return False
    return True


def merge_patch(current: APIObject, overrides: APIObject) -> APIObject:
    """Return a copy of ``current`` with ``overrides`` applied on top."""
    merged = copy.deepcopy(current)
    merged.update(copy.deepcopy(overrides))
    return merged


class Resource(Generic[RefT, InfoT]):
    """
    A handle on one provider resource and its desired state.

    Example:
        ```python
        repo = client.org_repositories.get(ref)
        repo.set(RepositoryInfo(description="new description"))
        if repo.reconcile():
            print("updated", repo.ref)
        ```
    """

    def __init__(
        self,
        client: ClientContext,
        adapter: ResourceAdapter[RefT, InfoT, Any],
        ref: RefT,
        api_object: APIObject | None = None,
        info: InfoT | None = None,
        create_options: Any | None = None,
    ) -> None:
        self._client = client
        self._adapter = adapter
        self._ref = ref
        self._object: APIObject = {}
        self._create_options = create_options
        self._state = ReconcileState.UNKNOWN

        if api_object is not None:
            self._object = copy.deepcopy(api_object)
            self._info = adapter.from_api(self._object)
            self._state = ReconcileState.IN_SYNC
        if info is not None:
            info.validate_info()
            self._info = info
        if api_object is None and info is None:
            raise ValueError("either api_object or info is required")

    @property
    def ref(self) -> RefT:
        return self._ref

    @property
    def state(self) -> ReconcileState:
        return self._state

    @property
    def api_object(self) -> APIObject:
        """A copy of the last server representation ({} if never fetched)."""
        return copy.deepcopy(self._object)

    def get(self) -> InfoT:
        """Return the desired state held by this handle."""
        return self._info

    def set(self, info: InfoT) -> None:
        """
        Replace the desired state.

        Raises:
            ValidationError: If ``info`` is invalid; the old state is kept
        """
        info.validate_info()
        self._info = info

    def update(self, ctx: Context | None = None) -> None:
        """
        Push the desired state to the server without comparing first.

        Only set fields are written (patch semantics). The snapshot is
        replaced with the server's answer.

        Raises:
            NotFoundError: If the resource doesn't exist
        """
        ctx = ensure_context(ctx)
        self._state = ReconcileState.UPDATING
        body = merge_patch(self._object, self._adapter.to_api(self._info))
        try:
            obj = self._adapter.update(ctx, self._ref, body)
        except GitProviderError:
            self._state = ReconcileState.FAILED
            log_reconcile_action(self._adapter.kind, self._ref, "failed")
            raise
        self._replace(obj)
        log_reconcile_action(self._adapter.kind, self._ref, "update")

    def reconcile(self, ctx: Context | None = None) -> bool:
        """
        Make the desired state the actual state on the server.

        Creates the resource if it doesn't exist, updates it if its settable
        fields differ, and does nothing otherwise.

        Returns:
            Whether a create or update was performed

        Raises:
            GitProviderError: Fetch errors other than NotFoundError propagate
                with ``action_taken`` False; a failed create or update
                propagates with ``action_taken`` True
        """
        ctx = ensure_context(ctx)
        self._state = ReconcileState.FETCHING
        try:
            actual = self._adapter.get(ctx, self._ref)
        except NotFoundError:
            return self._create(ctx)
        except GitProviderError:
            self._state = ReconcileState.FAILED
            raise

        desired = self._info
        if settable_fields_equal(
            self._normalized(desired),
            self._adapter.from_api(actual),
            self._adapter.settable_fields,
        ):
            self._object = copy.deepcopy(actual)
            self._state = ReconcileState.IN_SYNC
            log_reconcile_action(self._adapter.kind, self._ref, "noop")
            return False

        self._state = ReconcileState.UPDATING
        body = merge_patch(actual, self._adapter.to_api(desired))
        try:
            obj = self._adapter.update(ctx, self._ref, body)
        except GitProviderError as e:
            self._fail(e)
            raise
        self._replace(obj)
        log_reconcile_action(self._adapter.kind, self._ref, "update")
        return True

    def delete(self, ctx: Context | None = None) -> None:
        """
        Delete the resource irreversibly.

        Raises:
            DestructiveActionDisallowedError: Unless the client was built with
                destructive API calls enabled; checked before any request
            NotFoundError: If the resource doesn't exist anymore
        """
        if not self._client.destructive_actions:
            raise DestructiveActionDisallowedError(
                f"cannot delete {self._adapter.kind} {self._ref}: "
                "destructive API calls are disabled"
            )
        ctx = ensure_context(ctx)
        self._adapter.delete(ctx, self._ref)
        self._object = {}
        self._state = ReconcileState.UNKNOWN
        log_reconcile_action(self._adapter.kind, self._ref, "delete")

    def _create(self, ctx: Context) -> bool:
        self._state = ReconcileState.CREATING
        try:
            obj = self._adapter.create(ctx, self._ref, self._info, self._create_options)
        except GitProviderError as e:
            self._fail(e)
            raise
        self._replace(obj)
        log_reconcile_action(self._adapter.kind, self._ref, "create")
        return True

    def _normalized(self, info: InfoT) -> InfoT:
        """Project ``info`` the way server objects are projected; unset fields stay unset."""
        normalized = self._adapter.from_api(self._adapter.to_api(info))
        unset = {
            name: None
            for name in self._adapter.settable_fields
            if getattr(info, name) is None
        }
        return dataclasses.replace(normalized, **unset)

    def _fail(self, error: GitProviderError) -> None:
        # A write was attempted; part of it may have happened server-side
        error.action_taken = True
        self._state = ReconcileState.FAILED
        log_reconcile_action(self._adapter.kind, self._ref, "failed")

    def _replace(self, obj: APIObject) -> None:
        self._object = copy.deepcopy(obj)
        self._info = self._adapter.from_api(self._object)
        self._state = ReconcileState.IN_SYNC

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._ref}, state={self._state.value})"
