"""Application layer: use cases and the transaction boundary they run in."""

from keygate_identity.application.unit_of_work import UnitOfWork

__all__ = ["UnitOfWork"]
