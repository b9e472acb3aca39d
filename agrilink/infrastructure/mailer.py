"""Transactional Mail — verification and password-reset emails via the Resend HTTP API.

Invariants:
    - No API key configured → the link is logged instead of sent; with a key,
      only recipient and subject are logged (links carry account tokens)
    - User-supplied text is HTML-escaped before it enters a message body
    - HTTP or transport failures → ExternalServiceError; callers log and continue
"""

import html
import logging

import httpx

from agrilink.config import get_settings
from agrilink.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)

_TIMEOUT_SECONDS = 10.0


async def send_email(to: str, subject: str, body: str, link: str | None = None) -> None:
    settings = get_settings()
    if not settings.resend_api_key:
        suffix = f": {link}" if link else ""
        logger.info(f"Mail disabled, not sending '{subject}' to {to}{suffix}")
        return
    try:
        async with httpx.AsyncClient(timeout=_TIMEOUT_SECONDS) as client:
            response = await client.post(
                settings.resend_api_url,
                headers={"Authorization": f"Bearer {settings.resend_api_key}"},
                json={
                    "from": settings.mail_from,
                    "to": [to],
                    "subject": subject,
                    "html": body,
                },
            )
            response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise ExternalServiceError("Resend", f"HTTP {e.response.status_code}")
    except httpx.HTTPError as e:
        raise ExternalServiceError("Resend", str(e))
    logger.info(f"Sent '{subject}' to {to}")


def _greeting(name: str) -> str:
    return f"<p>Hello {html.escape(name)},</p>"


async def send_verification_email(to: str, name: str, token: str) -> None:
    link = f"{get_settings().app_url}/verify-email?token={token}"
    await send_email(
        to,
        "Verify your AgriLink email",
        _greeting(name)
        + "<p>Please confirm your email address to start trading on AgriLink.</p>"
        f'<p><a href="{link}">Verify email</a></p>'
        f"<p>This link expires in {get_settings().email_verification_hours} hours.</p>",
        link=link,
    )


async def send_password_reset_email(to: str, name: str, token: str) -> None:
    link = f"{get_settings().app_url}/reset-password?token={token}"
    await send_email(
        to,
        "Reset your AgriLink password",
        _greeting(name)
        + f'<p><a href="{link}">Reset your password</a></p>'
        f"<p>This link expires in {get_settings().password_reset_hours} hour(s). "
        "If you did not ask for a reset you can ignore this email.</p>",
        link=link,
    )


async def send_email_change_email(to: str, name: str, token: str) -> None:
    """Sent to the NEW address; the change applies only once this link is used."""
    link = f"{get_settings().app_url}/verify-email-change?token={token}"
    await send_email(
        to,
        "Confirm your new AgriLink email",
        _greeting(name)
        + "<p>Confirm this address to use it for your AgriLink account.</p>"
        f'<p><a href="{link}">Confirm new email</a></p>'
        f"<p>This link expires in {get_settings().email_verification_hours} hours.</p>",
        link=link,
    )
