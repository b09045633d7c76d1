"""Request authentication against an external user directory."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, Optional

from caskapi.config import Config

logger = logging.getLogger(__name__)

UserLookup = Callable[[str, str], Optional[Any]]
"""Looks up a user by ``(api_key, subject)``; returns the user or ``None``."""


class UserValidator:
    """Accepts requests whose ``x-user-subject`` names a known user."""

    def __init__(self, config: Config, lookup: UserLookup) -> None:
        self.config = config
        self.lookup = lookup

    def validate(self, environ: dict) -> bool:
        """Return whether the request comes from a valid user."""
        if self.config.local.development:
            return True
        subject = environ.get("HTTP_X_USER_SUBJECT", "")
        try:
            user = self.lookup(self.config.clerk_key, subject)
        except Exception:
            logger.debug("user lookup failed for %r", subject, exc_info=True)
            return False
        return user is not None

    def wrap(self, app: Callable) -> Callable:
        """Wrap a WSGI application so only validated requests reach it."""

        def guarded(environ: dict, start_response: Callable) -> Iterable[bytes]:
            if self.validate(environ):
                return app(environ, start_response)
            start_response("200 OK", [("Content-Length", "0")])
            return [b""]

        return guarded