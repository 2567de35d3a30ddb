"""
Email Service using Resend
Templates are written in MJML and compiled to HTML before sending
"""

import logging
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from .config import ACCOUNT_CONFIRMATION_TTL_HOURS, EMAIL_FROM_ADDRESS, RESEND_API_KEY, SITE_NAME
from .email_templates import account_confirmation_template

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


class EmailServiceError(Exception):
    """Raised when an email cannot be rendered or delivered"""


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise EmailServiceError(f"Failed to compile MJML template: {e}") from e

    # mjml_to_html returns a mapping with 'html' and 'errors' keys
    if result.get("errors"):
        logger.warning(f"MJML compilation warnings: {result['errors']}")
    return result.get("html", "")


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email through Resend

    Raises:
        EmailServiceError: when Resend is not configured or rejects the message
    """
    if not RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        raise EmailServiceError("Email service not configured")

    recipients = [to] if isinstance(to, str) else to
    email_data = {
        "from": from_address or EMAIL_FROM_ADDRESS,
        "to": recipients,
        "subject": subject,
        "html": compile_mjml_to_html(mjml_content),
    }

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(email_data)
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise EmailServiceError(f"Failed to send email: {e}") from e

    logger.info(f"✅ Email sent successfully via Resend: {response}")
    return response


async def send_account_confirmation_email(to: str, user_name: Optional[str], token: str) -> dict:
    """Send the account activation link to a freshly registered user"""
    mjml_content = account_confirmation_template(user_name, token, ACCOUNT_CONFIRMATION_TTL_HOURS)
    return await send_email(
        to=to,
        subject=f"Confirm your account - {SITE_NAME}",
        mjml_content=mjml_content,
    )
