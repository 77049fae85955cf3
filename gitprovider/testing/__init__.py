"""gitprovider testing utilities.

Provides an in-memory fake provider and fixtures for testing applications
that use gitprovider.
"""

from gitprovider.testing.fake import (
    FakeCall,
    FakeOrganizationAdapter,
    FakeProvider,
    FakeResourceAdapter,
    FakeResponse,
    FakeTeamAdapter,
)

__all__ = [
    # Fake provider
    "FakeProvider",
    "FakeCall",
    "FakeResponse",
    # Fake adapters
    "FakeResourceAdapter",
    "FakeOrganizationAdapter",
    "FakeTeamAdapter",
]
