"""Pytest fixtures for authority tests."""

from datetime import date

import pytest

from arc_scoring.authority import AuthorityConfig, AuthorityService
from arc_scoring.schemas import Account, FollowEdge

AS_OF = date(2026, 3, 10)


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def config() -> AuthorityConfig:
    return AuthorityConfig(convergence_threshold=1e-10, max_iterations=500)


@pytest.fixture
def service(config) -> AuthorityService:
    return AuthorityService(config=config)


@pytest.fixture
def star_accounts(seasoned_account) -> list[Account]:
    """Ten established accounts, ``a`` through ``j``."""
    return [seasoned_account(chr(ord("a") + i)) for i in range(10)]


@pytest.fixture
def star_edges() -> list[FollowEdge]:
    """Everyone follows ``a``."""
    return [FollowEdge(chr(ord("a") + i), "a") for i in range(1, 10)]
