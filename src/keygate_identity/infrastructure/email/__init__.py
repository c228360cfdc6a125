"""Email delivery for identity notifications."""

from keygate_identity.infrastructure.email.email_service import EmailService

__all__ = ["EmailService"]
