# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""SQLAlchemy persistence for keygate_identity."""

from keygate_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase
from keygate_identity.infrastructure.persistence.sqlalchemy.init_db import (
    create_tables,
    drop_tables,
)
from keygate_identity.infrastructure.persistence.sqlalchemy.repositories import (
    UserRepositorySQLAlchemy,
    VerificationTokenRepositorySQLAlchemy,
)
from keygate_identity.infrastructure.persistence.sqlalchemy.unit_of_work import (
    SQLAlchemyUnitOfWork,
)

__all__ = [
    "IdentityBase",
    "SQLAlchemyUnitOfWork",
    "UserRepositorySQLAlchemy",
    "VerificationTokenRepositorySQLAlchemy",
    "create_tables",
    "drop_tables",
]
