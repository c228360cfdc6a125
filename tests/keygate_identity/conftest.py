"""
Pytest configuration for keygate_identity tests.

Fixtures specific to the identity domain (users and their tokens).
"""

import pytest

from keygate_identity.domain.user import User
from tests.shared.fixtures.factories import UserFactory


@pytest.fixture
def alice() -> User:
    """An unverified user with no verification tokens."""
    return UserFactory.alice()


@pytest.fixture
def verified_alice() -> User:
    """A verified user."""
    return UserFactory.alice(email_verified=True)
