"""
Email Service for FormFlow
==========================
Handles transactional email:
- Email verification on signup
- Password reset OTP

Delivery is best-effort: failures are logged and reported as False, never raised.
"""

import aiosmtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional
from datetime import datetime

from formflow.core.config import settings
from formflow.core.logging_config import logger


class EmailService:
    """Async email service over SMTP"""

    def __init__(self):
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER
        self.smtp_password = settings.SMTP_PASSWORD
        self.from_email = settings.EMAIL_FROM
        self.from_name = settings.EMAIL_FROM_NAME
        self.app_url = settings.APP_URL.rstrip("/")

    @property
    def is_configured(self) -> bool:
        """Check if email service is properly configured"""
        return bool(self.smtp_user and self.smtp_password)

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> bool:
        """
        Send an email asynchronously.

        Returns True if successful, False otherwise.
        """
        if not self.is_configured:
            logger.warning(f"[Email] Email service not configured, skipping '{subject}' to {to_email}")
            return False

        try:
            message = MIMEMultipart("alternative")
            message["From"] = f"{self.from_name} <{self.from_email}>"
            message["To"] = to_email
            message["Subject"] = subject

            # Plain text first, HTML last (preferred by clients)
            if text_content:
                message.attach(MIMEText(text_content, "plain"))
            message.attach(MIMEText(html_content, "html"))

            await aiosmtplib.send(
                message,
                hostname=self.smtp_host,
                port=self.smtp_port,
                username=self.smtp_user,
                password=self.smtp_password,
                start_tls=True
            )

            logger.info(f"[Email/SMTP] Successfully sent email to {to_email}: {subject}")
            return True

        except Exception as e:
            logger.error(f"[Email/SMTP] Failed to send email to {to_email}: {e}")
            return False

    def verification_link(self, token: str) -> str:
        return f"{self.app_url}/verify-email/{token}"

    async def send_verification_email(
        self,
        to_email: str,
        user_name: Optional[str],
        verification_token: str
    ) -> bool:
        """Send email verification link to new user"""
        link = self.verification_link(verification_token)
        hours = settings.VERIFICATION_TOKEN_EXPIRE_HOURS

        subject = "Verify your FormFlow email"

        html_content = f"""
        <!DOCTYPE html>
        <html>
        <body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333;">
            <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
                <h2>Welcome to FormFlow!</h2>
                <p>Hi {user_name or 'there'},</p>
                <p>Please verify your email address to start building forms.</p>
                <p>
                    <a href="{link}" style="background-color: #3b82f6; color: white; padding: 10px 20px; text-decoration: none; border-radius: 4px;">Verify Email</a>
                </p>
                <p style="font-size: 14px; color: #6b7280;">Or copy this link: {link}</p>
                <p style="font-size: 14px; color: #6b7280;">This link will expire in {hours} hours.</p>
                <p style="font-size: 12px; color: #6b7280;">&copy; {datetime.utcnow().year} FormFlow</p>
            </div>
        </body>
        </html>
        """

        text_content = f"""
        Welcome to FormFlow!

        Hi {user_name or 'there'},

        Please verify your email address by opening the link below:

        {link}

        This link will expire in {hours} hours.
        """

        return await self.send_email(to_email, subject, html_content, text_content)

    async def send_password_reset_otp(self, to_email: str, otp: str) -> bool:
        """Send the one-time code that starts a password reset"""
        minutes = settings.RESET_OTP_EXPIRE_MINUTES

        subject = "Your FormFlow Password Reset OTP"

        html_content = f"""
        <!DOCTYPE html>
        <html>
        <body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333;">
            <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
                <h2>Password Reset Request</h2>
                <p>Your one-time password (OTP) for password reset is:</p>
                <h3 style="background-color: #f3f4f6; padding: 10px; letter-spacing: 2px;">{otp}</h3>
                <p>This OTP expires in {minutes} minutes.</p>
                <p style="font-size: 14px; color: #6b7280;">If you didn't request a password reset, you can ignore this email.</p>
            </div>
        </body>
        </html>
        """

        text_content = f"""
        Password Reset Request

        Your one-time password (OTP) is: {otp}

        This OTP expires in {minutes} minutes.
        """

        return await self.send_email(to_email, subject, html_content, text_content)


email_service = EmailService()
