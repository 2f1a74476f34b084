"""Author notification — e-mail the change author when secrets are found.

The recipient is resolved from the GitHub Actions event payload first and
from the GitHub users API second. Notification is a separate failure
domain: callers report a :class:`NotificationError` and keep the findings.
"""

from __future__ import annotations

import json
import logging
import smtplib
from datetime import datetime
from email.message import EmailMessage
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import requests

from camel_leaked import __version__
from camel_leaked.config.schema import NotifyConfig
from camel_leaked.findings.models import Finding
from camel_leaked.scanner.filters import IGNORE_MARKER

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
DEFAULT_HTTP_TIMEOUT_SECONDS = 15.0
CONTEXT_LIMIT = 100


class NotificationError(Exception):
    """Raised when a notification could not be delivered."""


def _dig(data: Any, *keys: Any) -> Any:
    """Walk nested dicts/lists, returning None on the first missing key."""
    for key in keys:
        if isinstance(data, dict):
            data = data.get(key)
        elif isinstance(data, list) and isinstance(key, int) and -len(data) <= key < len(data):
            data = data[key]
        else:
            return None
    return data


class Notifier:
    """Compose and send the secret-leak alert."""

    def __init__(
        self,
        config: NotifyConfig,
        session: Optional[requests.Session] = None,
        smtp_factory: Any = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/vnd.github+json",
            "User-Agent": f"camel-leaked/{__version__}",
        })
        if config.github_token:
            self.session.headers["Authorization"] = f"Bearer {config.github_token}"
        self._smtp_factory = smtp_factory

    # ---- recipient resolution ----

    def _load_event(self) -> Optional[Dict[str, Any]]:
        path = self.config.github_event_path
        if not path or not Path(path).is_file():
            return None
        try:
            event = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Cannot read GitHub event payload %s: %s", path, exc)
            return None
        return event if isinstance(event, dict) else None

    @staticmethod
    def email_from_event(event: Dict[str, Any]) -> Optional[str]:
        for keys in (
            ("pull_request", "user", "email"),
            ("commits", 0, "author", "email"),
            ("head_commit", "author", "email"),
        ):
            email = _dig(event, *keys)
            if isinstance(email, str) and email:
                return email
        return None

    @staticmethod
    def login_from_event(event: Dict[str, Any]) -> Optional[str]:
        for keys in (
            ("pull_request", "user", "login"),
            ("pusher", "name"),
            ("sender", "login"),
        ):
            login = _dig(event, *keys)
            if isinstance(login, str) and login:
                return login
        return None

    def _email_from_api(self, login: str) -> Optional[str]:
        url = f"{GITHUB_API}/users/{login}"
        try:
            r = self.session.get(url, timeout=DEFAULT_HTTP_TIMEOUT_SECONDS)
            r.raise_for_status()
            email = (r.json() or {}).get("email")
        except (requests.RequestException, ValueError) as exc:
            logger.warning("GitHub user lookup for %s failed: %s", login, exc)
            return None
        return email or None

    def resolve_recipient(self) -> Optional[str]:
        """Return the author's e-mail address, or None if it cannot be found."""
        event = self._load_event()
        if event is None:
            return None
        email = self.email_from_event(event)
        if email:
            logger.info("Recipient resolved from event payload")
            return email
        if not (self.config.github_token and self.config.github_repository):
            return None
        login = self.login_from_event(event)
        if not login:
            return None
        email = self._email_from_api(login)
        if email:
            logger.info("Recipient resolved from GitHub user %s", login)
        return email

    # ---- message ----

    def build_subject(self) -> str:
        return (
            "🚨 SECURITY ALERT: Secrets detected in "
            f"{self.config.github_repository or 'repository'}"
        )

    def build_body(self, findings: Sequence[Finding]) -> str:
        lines: List[str] = [
            "SECURITY ALERT: Hardcoded Secrets Detected",
            "",
            f"Repository: {self.config.github_repository or 'Unknown'}",
            f"Detection Time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            f"Number of Secrets Found: {len(findings)}",
            "",
            "The following potential secrets have been detected in your code changes:",
            "",
        ]
        for i, finding in enumerate(findings, 1):
            lines.append(f"Finding #{i}:")
            lines.append(f"  File: {finding.file}")
            if finding.line_number is not None:
                lines.append(f"  Line: {finding.line_number}")
            lines.append(f"  Rule: {finding.rule_name}")
            lines.append(f"  Detected Content: {finding.content}")
            if finding.context:
                context = finding.context
                if len(context) > CONTEXT_LIMIT:
                    context = context[:CONTEXT_LIMIT] + "..."
                lines.append(f"  Context: {context}")
            lines.append("")
        lines += [
            "WHAT YOU NEED TO DO:",
            "",
            "1. Do not merge this change.",
            "2. Review each detected secret.",
            "3. Move secrets to environment variables or a secret manager.",
            "4. If a real secret was committed, rotate it and update the services using it.",
            "5. Re-run the scan to confirm the fix.",
            "",
            "If a finding is a false positive, add this comment at the end of the line:",
            f"# {IGNORE_MARKER}",
            "",
            "---",
            "This alert was generated automatically by camel-leaked.",
        ]
        return "\n".join(lines) + "\n"

    # ---- delivery ----

    def _send_email(self, to: str, subject: str, body: str) -> None:
        cfg = self.config
        if not cfg.smtp_host:
            raise NotificationError("SMTP host not configured")

        msg = EmailMessage()
        msg["From"] = cfg.from_email
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(body)

        # SSL/STARTTLS only on the authenticated transport
        authenticated = bool(cfg.smtp_user and cfg.smtp_pass)
        if self._smtp_factory is not None:
            factory = self._smtp_factory
        elif authenticated and cfg.smtp_port == 465:
            factory = smtplib.SMTP_SSL
        else:
            factory = smtplib.SMTP

        try:
            with factory(cfg.smtp_host, cfg.smtp_port, timeout=DEFAULT_HTTP_TIMEOUT_SECONDS) as smtp:
                if authenticated:
                    if cfg.smtp_port == 587:
                        smtp.starttls()
                    smtp.login(cfg.smtp_user, cfg.smtp_pass)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(f"Failed to send email notification: {exc}") from exc

    def check_email_config(self) -> bool:
        """Send a test message to the configured sender address.

        Returns True when the message was accepted, False otherwise.
        """
        try:
            self._send_email(
                self.config.from_email,
                "camel-leaked configuration test",
                "This is a test email from camel-leaked to verify SMTP configuration.\n",
            )
        except NotificationError as exc:
            logger.warning("Email configuration check failed: %s", exc)
            return False
        return True

    def send_notification(self, findings: Sequence[Finding]) -> bool:
        """E-mail *findings* to the change author.

        Returns False (nothing sent) for an empty list or when no recipient
        can be resolved. Raises NotificationError on delivery failure.
        """
        if not findings:
            return False
        recipient = self.resolve_recipient()
        if not recipient:
            logger.warning("Could not determine recipient email address")
            return False
        self._send_email(recipient, self.build_subject(), self.build_body(findings))
        logger.info("Notification sent for %d finding(s)", len(findings))
        return True
