"""Unit test fixtures for resolvers and their collaborators."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from foxsource.resolution.base import ResolverConfig

# ============================================================================
# Resolver Configuration Fixtures
# ============================================================================


@pytest.fixture
def resolver_config_disabled() -> ResolverConfig:
    """Create a disabled resolver config."""
    return ResolverConfig(enabled=False)


# ============================================================================
# Collaborator Fixtures
# ============================================================================


@pytest.fixture
def fuzzysearch() -> AsyncMock:
    """Create a stand-in for the hash-search client."""
    client = AsyncMock()
    client.search_exact.return_value = []
    client.search_ranked.return_value = []
    client.lookup_url.return_value = []
    return client


@pytest.fixture
def credential_store() -> AsyncMock:
    """Create a credential store with nothing linked."""
    store = AsyncMock()
    store.get_linked_credential.return_value = None
    store.get_request_token.return_value = None
    return store
