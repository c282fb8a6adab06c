import logging
import secrets
import time
from typing import Callable

from wikibase_forms.models.errors import FormSessionNotFoundError
from wikibase_forms.models.session import FormSession

logger = logging.getLogger(__name__)


class SessionStore:
    """Server side form sessions keyed by an opaque token.

    Submissions are built from the session stored when the form was
    generated. Sessions live ``ttl`` seconds.
    """

    def __init__(self, ttl: float = 3600.0, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self.clock = clock
        self._sessions: dict[str, tuple[FormSession, float]] = {}

    def put(self, session: FormSession) -> str:
        self._purge()
        token = secrets.token_urlsafe(32)
        self._sessions[token] = (session, self.clock())
        logger.debug(f"Stored {session.mode.value} session for {session.entity_type}")
        return token

    def get(self, token: str) -> FormSession:
        entry = self._sessions.get(token)
        if entry is None:
            raise FormSessionNotFoundError(token)
        session, stored_at = entry
        if self.clock() - stored_at >= self.ttl:
            del self._sessions[token]
            raise FormSessionNotFoundError(token)
        return session

    def discard(self, token: str) -> None:
        self._sessions.pop(token, None)

    def _purge(self) -> None:
        now = self.clock()
        expired = [t for t, (_, stored_at) in self._sessions.items() if now - stored_at >= self.ttl]
        for token in expired:
            del self._sessions[token]
        if expired:
            logger.debug(f"Dropped {len(expired)} expired form sessions")

    def __len__(self) -> int:
        return len(self._sessions)
