"""
MJML e-mail templates for account messages
"""

from typing import Optional

from .config import FRONTEND_URL, SITE_NAME

COLORS = {
    "accent": "#0f766e",
    "page": "#f1f5f4",
    "card": "#ffffff",
    "heading": "#111827",
    "body": "#374151",
    "hint": "#6b7280",
    "rule": "#d1d5db",
}

FONT_STACK = "Inter, 'Segoe UI', Roboto, Arial, sans-serif"


def _button(url: str, label: str) -> str:
    return f"""
            <mj-button href="{url}" background-color="{COLORS['accent']}" color="#ffffff"
                       border-radius="6px" font-size="15px" font-weight="600"
                       inner-padding="14px 32px" padding="24px 0 8px 0">
              {label}
            </mj-button>
            <mj-text font-size="13px" color="{COLORS['hint']}">
              Button not working? Paste this address into your browser:<br/>
              <a href="{url}" style="color: {COLORS['accent']}; word-break: break-all;">{url}</a>
            </mj-text>
    """


def render_layout(
    title: str,
    preview_text: str,
    body: str,
    action_url: Optional[str] = None,
    action_label: Optional[str] = None,
) -> str:
    """Wrap message body in the common layout: brand bar, card, footer"""
    action = _button(action_url, action_label) if action_url and action_label else ""

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="{FONT_STACK}" />
          <mj-text font-size="15px" line-height="1.55" color="{COLORS['body']}" padding="6px 0" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{COLORS['page']}" width="560px">
        <mj-section padding="28px 0 12px 0">
          <mj-column>
            <mj-text align="center" font-size="20px" font-weight="700" color="{COLORS['accent']}">
              {SITE_NAME}
            </mj-text>
          </mj-column>
        </mj-section>

        <mj-wrapper background-color="{COLORS['card']}" border-radius="10px" padding="32px 36px">
          <mj-section padding="0">
            <mj-column>
              <mj-text font-size="22px" font-weight="700" color="{COLORS['heading']}" padding="0 0 12px 0">
                {title}
              </mj-text>
              {body}
              {action}
            </mj-column>
          </mj-section>
        </mj-wrapper>

        <mj-section padding="20px 0">
          <mj-column>
            <mj-divider border-color="{COLORS['rule']}" border-width="1px" padding="0 0 12px 0" />
            <mj-text align="center" font-size="12px" color="{COLORS['hint']}">
              Sent by {SITE_NAME} because this address was used to register an account.
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def account_confirmation_link(token: str) -> str:
    return f"{FRONTEND_URL}/confirm-account?token={token}"


def account_confirmation_template(user_name: Optional[str], token: str, ttl_hours: int) -> str:
    """Account confirmation MJML template"""
    greeting = f"Hi {user_name}," if user_name else "Hi,"
    content = f"""
            <mj-text>
              {greeting}
            </mj-text>
            <mj-text>
              Thanks for signing up. Confirm your e-mail address to activate your account.
              The link expires in {ttl_hours} hours.
            </mj-text>
            <mj-text color="{COLORS['hint']}" font-size="14px">
              If you didn't create an account, you can safely ignore this email.
            </mj-text>
    """
    return render_layout(
        title="Confirm your account",
        preview_text=f"Activate your {SITE_NAME} account",
        body=content,
        action_url=account_confirmation_link(token),
        action_label="Confirm account",
    )
