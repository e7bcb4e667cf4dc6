"""
HTML validity checking (WCAG 4.1.1).

Markup validation is delegated to a Nu HTML Checker service
(https://validator.w3.org/nu/ or a self-hosted instance). The auditor only
depends on ``HTMLValidator.validate``; tests and offline builds can plug in
another implementation.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from .exceptions import ValidatorError

logger = logging.getLogger(__name__)

DEFAULT_VALIDATOR_URL = "https://validator.w3.org/nu/"
DEFAULT_TIMEOUT = 10


@dataclass
class ValidationMessage:
    """One message reported by the markup validator"""
    type: str
    message: str
    line: Optional[int] = None
    column: Optional[int] = None
    extract: Optional[str] = None


class HTMLValidator:
    """Interface for a markup validator."""

    def validate(self, html: str) -> List[ValidationMessage]:
        raise NotImplementedError("Subclasses must implement validate()")


class NuHTMLValidator(HTMLValidator):
    """
    Client for the Nu HTML Checker JSON API.

    Usage:
        validator = NuHTMLValidator()
        messages = validator.validate(html)
    """

    def __init__(self, url: str = DEFAULT_VALIDATOR_URL, timeout: float = DEFAULT_TIMEOUT,
                 session: requests.Session = None):
        """
        Initialize the validator client.

        Args:
            url: Base URL of the checker service
            timeout: Request timeout in seconds
            session: Optional requests session (connection reuse, testing)
        """
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def validate(self, html: str) -> List[ValidationMessage]:
        """
        Validate an HTML document.

        Raises:
            ValidatorError: If the service cannot be reached or returns
                something other than a JSON message list
        """
        try:
            response = self.session.post(
                self.url,
                params={'out': 'json'},
                data=html.encode('utf-8'),
                headers={
                    'Content-Type': 'text/html; charset=utf-8',
                    'User-Agent': 'accessdocs',
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise ValidatorError(f"Validator request failed: {e}") from e
        except ValueError as e:
            raise ValidatorError(f"Validator returned invalid JSON: {e}") from e

        raw_messages = payload.get('messages') if isinstance(payload, dict) else None
        if not isinstance(raw_messages, list):
            raise ValidatorError("Validator response has no message list")

        messages = [self._to_message(raw) for raw in raw_messages]
        logger.debug(f"Validator returned {len(messages)} message(s)")
        return messages

    def _to_message(self, raw: dict) -> ValidationMessage:
        msg_type = raw.get('type', 'info')
        # Nu reports warnings as info messages with a warning subtype
        if msg_type == 'info' and raw.get('subType') == 'warning':
            msg_type = 'warning'

        return ValidationMessage(
            type=msg_type,
            message=raw.get('message', ''),
            line=raw.get('lastLine', raw.get('firstLine')),
            column=raw.get('firstColumn', raw.get('lastColumn')),
            extract=raw.get('extract'),
        )
