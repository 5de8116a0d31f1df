"""
Identity provider.

Signs in with a custom token when one is configured, anonymously
otherwise. The uid derived from a custom token is stable, so the same
token always reaches the same record collection.
"""

from __future__ import annotations

import hashlib
import inspect
import logging
import re
import secrets
import uuid
from typing import Awaitable, Callable, List, Optional, Protocol, Union

from wage_tracker.domain.errors import AuthError
from wage_tracker.domain.models import Identity

logger = logging.getLogger(__name__)

IdentityListener = Callable[[Optional[Identity]], Union[None, Awaitable[None]]]

_TOKEN_RE = re.compile(r"^[A-Za-z0-9\-\._~+/=]{8,4096}$")


class IdentityProvider(Protocol):
    async def sign_in(self) -> Identity:
        ...

    async def sign_out(self) -> None:
        ...

    def on_identity_changed(self, callback: IdentityListener) -> Callable[[], None]:
        ...


def uid_for_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:28]


class TokenIdentityProvider:
    """Local identity provider with custom-token and anonymous sign-in"""

    def __init__(self, custom_token: Optional[str] = None):
        self._custom_token = custom_token
        self._current: Optional[Identity] = None
        self._listeners: List[IdentityListener] = []

    @property
    def current(self) -> Optional[Identity]:
        return self._current

    async def sign_in(self) -> Identity:
        if self._custom_token is not None:
            identity = self._sign_in_with_custom_token(self._custom_token)
        else:
            identity = Identity(
                uid=uuid.uuid4().hex[:28],
                token=secrets.token_urlsafe(32),
                is_anonymous=True,
            )
        await self._set_current(identity)
        logger.info("Signed in uid=%s anonymous=%s", identity.uid, identity.is_anonymous)
        return identity

    def _sign_in_with_custom_token(self, token: str) -> Identity:
        token = token.strip()
        if not _TOKEN_RE.match(token):
            raise AuthError("Custom token is malformed")
        return Identity(uid=uid_for_token(token), token=token, is_anonymous=False)

    async def sign_out(self) -> None:
        await self._set_current(None)

    def on_identity_changed(self, callback: IdentityListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it"""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def _set_current(self, identity: Optional[Identity]) -> None:
        if identity == self._current:
            return
        self._current = identity
        for listener in list(self._listeners):
            result = listener(identity)
            if inspect.isawaitable(result):
                await result
