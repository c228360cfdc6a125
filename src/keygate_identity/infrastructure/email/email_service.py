import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from keygate_config.settings import Settings
from keygate_identity.exceptions import EmailFailureError

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verify your email to activate your account"

VERIFICATION_TEXT = """Hello,

Please follow the link below to verify your email and activate your account:
{verification_link}

If you didn't create an account, you can safely ignore this email.

-- {app_name}
"""

VERIFICATION_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px;">
        <h2 style="color: #111827; margin-top: 0;">Verify your email</h2>
        <p style="color: #374151; line-height: 1.6;">Click the button below to verify your email and activate your account.</p>
        <p style="margin: 30px 0; text-align: center;">
            <a href="{verification_link}" style="display: inline-block; padding: 14px 28px; background-color: #2563eb; color: #ffffff !important; text-decoration: none; border-radius: 6px; font-weight: 600;">Verify Email</a>
        </p>
        <p style="color: #6b7280; font-size: 14px;">Or copy and paste this link into your browser:</p>
        <p style="word-break: break-all; color: #2563eb; font-size: 14px;">{verification_link}</p>
        <p style="color: #9ca3af; font-size: 13px; margin-top: 40px;">{app_name}</p>
    </div>
</body>
</html>
"""

PASSWORD_RESET_SUBJECT = "Your password reset request link"

PASSWORD_RESET_TEXT = """Hello,

You requested a password reset on our website.

Follow the link below to reset your password (valid for {valid_minutes} minutes):
{reset_link}

If you didn't request this, you can safely ignore this email.

-- {app_name}
"""

PASSWORD_RESET_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px;">
        <h2 style="color: #111827; margin-top: 0;">Password Reset Request</h2>
        <p style="color: #374151; line-height: 1.6;">Click the button below to reset your password. This link is valid for {valid_minutes} minutes.</p>
        <p style="margin: 30px 0; text-align: center;">
            <a href="{reset_link}" style="display: inline-block; padding: 14px 28px; background-color: #2563eb; color: #ffffff !important; text-decoration: none; border-radius: 6px; font-weight: 600;">Reset Password</a>
        </p>
        <p style="color: #6b7280; font-size: 14px;">Or copy and paste this link into your browser:</p>
        <p style="word-break: break-all; color: #2563eb; font-size: 14px;">{reset_link}</p>
        <p style="color: #9ca3af; font-size: 13px; margin-top: 40px;">If you didn't request this, you can safely ignore this email.</p>
    </div>
</body>
</html>
"""


class EmailService:
    def __init__(self, settings: Settings):
        self._settings = settings

    def _create_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self._settings.smtp_from_name} <{self._settings.smtp_from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain"))
        if html_body:
            msg.attach(MIMEText(html_body, "html"))

        return msg

    def _send_email(self, to_email: str, message: MIMEMultipart) -> None:
        if not self._settings.smtp_host:
            logger.error("SMTP host not configured")
            raise EmailFailureError("SMTP host not configured")

        smtp_password = (
            self._settings.smtp_password.get_secret_value()
            if self._settings.smtp_password
            else ""
        )

        try:
            if self._settings.smtp_use_tls and not self._settings.smtp_starttls:
                # Implicit TLS (port 465)
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                    context=context,
                ) as server:
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)
            else:
                # STARTTLS (port 587) or plain
                with smtplib.SMTP(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                ) as server:
                    if self._settings.smtp_starttls:
                        context = ssl.create_default_context()
                        server.starttls(context=context)
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)

            logger.info("Email sent to %s", to_email)

        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            raise EmailFailureError from e

    def send(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> None:
        """Send an email, raising EmailFailureError if delivery fails.

        With SMTP disabled the email is logged and dropped.
        """
        if not self._settings.smtp_enabled:
            logger.warning(
                "SMTP disabled, email '%s' to %s not sent",
                subject,
                to_email,
            )
            return

        message = self._create_message(
            to_email=to_email,
            subject=subject,
            text_body=text_body,
            html_body=html_body,
        )
        self._send_email(to_email, message)

    def send_verification_email(self, to_email: str, verification_link: str) -> None:
        app_name = self._settings.app_name
        self.send(
            to_email=to_email,
            subject=VERIFICATION_SUBJECT,
            text_body=VERIFICATION_TEXT.format(
                verification_link=verification_link,
                app_name=app_name,
            ),
            html_body=VERIFICATION_HTML.format(
                verification_link=verification_link,
                app_name=app_name,
            ),
        )

    def send_password_reset_email(self, to_email: str, reset_link: str) -> None:
        valid_minutes = self._settings.jwt_password_reset_token_expire_minutes
        self.send(
            to_email=to_email,
            subject=PASSWORD_RESET_SUBJECT,
            text_body=PASSWORD_RESET_TEXT.format(
                reset_link=reset_link,
                valid_minutes=valid_minutes,
                app_name=self._settings.app_name,
            ),
            html_body=PASSWORD_RESET_HTML.format(
                reset_link=reset_link,
                valid_minutes=valid_minutes,
            ),
        )
