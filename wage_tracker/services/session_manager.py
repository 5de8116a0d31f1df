"""
Session Manager
Owns the identity lifecycle; the only consumer of the identity provider.
"""

from __future__ import annotations

import inspect
import logging
from typing import Awaitable, Callable, List, Optional, Union

from wage_tracker.domain.errors import AuthError, NoActiveSession
from wage_tracker.domain.models import Identity, Session
from wage_tracker.infrastructure.identity.token_provider import IdentityProvider
from wage_tracker.utils.time import now_utc

logger = logging.getLogger(__name__)

SessionListener = Callable[[Optional[Session]], Union[None, Awaitable[None]]]


class SessionManager:
    """
    Exactly one session per process: created on sign-in, replaced when the
    provider reports a different identity, destroyed on sign-out.
    """

    def __init__(self, provider: IdentityProvider):
        self._provider = provider
        self._session: Optional[Session] = None
        self._listeners: List[SessionListener] = []
        self._auth_error: Optional[AuthError] = None
        self._unsubscribe_provider = provider.on_identity_changed(self._handle_identity_changed)

    @property
    def current(self) -> Optional[Session]:
        return self._session

    @property
    def is_ready(self) -> bool:
        return self._session is not None

    @property
    def auth_error(self) -> Optional[AuthError]:
        return self._auth_error

    def require(self) -> Session:
        if self._session is None:
            raise NoActiveSession()
        return self._session

    def on_session_changed(self, callback: SessionListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def sign_in(self) -> Session:
        """
        Sign in through the provider. Not retried on failure.

        Raises:
            AuthError: the provider rejected the sign-in
        """
        try:
            identity = await self._provider.sign_in()
        except AuthError as exc:
            self._auth_error = exc
            logger.error("Sign-in failed: %s", exc)
            raise
        self._auth_error = None

        # The provider normally reports the identity through the listener already
        if self._session is None or self._session.identity != identity:
            await self._handle_identity_changed(identity)
        return self._session

    async def sign_out(self) -> None:
        await self._provider.sign_out()
        # Providers that do not notify on sign-out still end the session
        if self._session is not None:
            await self._handle_identity_changed(None)

    def close(self) -> None:
        self._unsubscribe_provider()

    async def _handle_identity_changed(self, identity: Optional[Identity]) -> None:
        if identity is None:
            if self._session is None:
                return
            logger.info("Session ended for uid=%s", self._session.uid)
            self._session = None
        else:
            if self._session is not None and self._session.identity == identity:
                return
            self._session = Session(identity=identity, started_at=now_utc())
            logger.info("Session started for uid=%s", identity.uid)

        for listener in list(self._listeners):
            result = listener(self._session)
            if inspect.isawaitable(result):
                await result
