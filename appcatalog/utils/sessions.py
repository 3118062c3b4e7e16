"""
Session Store
Server-held admin sessions keyed by an opaque token delivered in a signed cookie

Two stores share one interface: an in-process dictionary (single worker) and
async Redis (shared between workers). The cookie only carries the signed token.
"""

import json
import secrets
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple

import redis.asyncio as aioredis
import structlog
from itsdangerous import BadSignature, TimestampSigner
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from appcatalog.config import Settings

logger = structlog.get_logger(__name__)


class SessionStore(ABC):
    """Storage backend for session data"""

    @abstractmethod
    async def get(self, token: str) -> Optional[Dict[str, Any]]:
        """Return session data, or None if missing or expired"""

    @abstractmethod
    async def set(self, token: str, data: Dict[str, Any], ttl: int) -> None:
        """Store session data for ttl seconds"""

    @abstractmethod
    async def delete(self, token: str) -> bool:
        """Remove a session; True if it existed"""

    async def close(self) -> None:
        return None


class InMemorySessionStore(SessionStore):
    """Process-local session store with per-entry expiry"""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._sessions: Dict[str, Tuple[float, Dict[str, Any]]] = {}

    async def get(self, token: str) -> Optional[Dict[str, Any]]:
        entry = self._sessions.get(token)
        if entry is None:
            return None
        expires_at, data = entry
        if expires_at <= self._clock():
            del self._sessions[token]
            return None
        return dict(data)

    async def set(self, token: str, data: Dict[str, Any], ttl: int) -> None:
        self._sessions[token] = (self._clock() + ttl, dict(data))

    async def delete(self, token: str) -> bool:
        return self._sessions.pop(token, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)


class RedisSessionStore(SessionStore):
    """Session store backed by async Redis with automatic expiration"""

    SESSION_PREFIX = "session"

    def __init__(self, client: aioredis.Redis):
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisSessionStore":
        return cls(aioredis.from_url(url, decode_responses=True))

    def _key(self, token: str) -> str:
        return f"{self.SESSION_PREFIX}:{token}"

    async def get(self, token: str) -> Optional[Dict[str, Any]]:
        raw = await self._client.get(self._key(token))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning("Discarding unreadable session", token=token[:10])
            return None

    async def set(self, token: str, data: Dict[str, Any], ttl: int) -> None:
        await self._client.setex(self._key(token), ttl, json.dumps(data))

    async def delete(self, token: str) -> bool:
        deleted = await self._client.delete(self._key(token))
        return deleted > 0

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("Redis session store closed")


def build_session_store(settings: Settings) -> SessionStore:
    """Pick the session store configured by SESSION_BACKEND"""
    if settings.session_backend == "redis":
        logger.info("Using Redis session store")
        return RedisSessionStore.from_url(settings.redis_url)
    logger.info("Using in-memory session store")
    return InMemorySessionStore()


class Session:
    """Session state attached to one request"""

    def __init__(self, token: Optional[str] = None, data: Optional[Dict[str, Any]] = None):
        self.token = token
        self.data: Dict[str, Any] = dict(data or {})
        self.saved = False
        self.destroyed = False

    @property
    def authenticated(self) -> bool:
        return bool(self.data.get("authenticated"))

    @property
    def user(self) -> Optional[str]:
        return self.data.get("user")


class SessionManager:
    """Issues session tokens, signs cookies and persists session data"""

    def __init__(
        self,
        store: SessionStore,
        secret: str,
        cookie_name: str = "appcatalog.sid",
        max_age: int = 86400,
    ):
        self.store = store
        self.cookie_name = cookie_name
        self.max_age = max_age
        self._signer = TimestampSigner(secret)

    @staticmethod
    def generate_session_token() -> str:
        return secrets.token_urlsafe(32)

    def sign(self, token: str) -> str:
        return self._signer.sign(token).decode("utf-8")

    def unsign(self, value: str) -> Optional[str]:
        """Token from a cookie value, or None if tampered or expired"""
        try:
            return self._signer.unsign(value, max_age=self.max_age).decode("utf-8")
        except BadSignature:
            return None

    async def load(self, request: Request) -> Session:
        """Session for the request's cookie; empty when absent or unknown"""
        cookie = request.cookies.get(self.cookie_name)
        if not cookie:
            return Session()

        token = self.unsign(cookie)
        if token is None:
            logger.warning("Rejected session cookie with bad signature")
            return Session()

        try:
            data = await self.store.get(token)
        except Exception as e:
            logger.error("Error retrieving session", error=str(e))
            return Session()

        if data is None:
            return Session()
        return Session(token, data)

    async def login(self, session: Session, username: str) -> None:
        """Mark the session authenticated and persist it"""
        if session.token is None:
            session.token = self.generate_session_token()
        session.data.update({"authenticated": True, "user": username})
        await self.store.set(session.token, session.data, self.max_age)
        session.saved = True
        logger.info("Session created", user=username)

    async def destroy(self, session: Session) -> None:
        """Remove the session from the store; store failures propagate"""
        if session.token is not None:
            await self.store.delete(session.token)
            logger.info("Session destroyed", user=session.user)
        session.data.clear()
        session.destroyed = True

    def apply_cookie(self, response: Response, session: Session) -> None:
        if session.destroyed:
            response.delete_cookie(self.cookie_name, path="/")
        elif session.saved and session.token:
            response.set_cookie(
                self.cookie_name,
                self.sign(session.token),
                max_age=self.max_age,
                path="/",
                httponly=True,
                samesite="lax",
            )


class SessionMiddleware(BaseHTTPMiddleware):
    """Attach request.state.session and write the cookie back"""

    def __init__(self, app, manager: SessionManager):
        super().__init__(app)
        self.manager = manager

    async def dispatch(self, request: Request, call_next) -> Response:
        session = await self.manager.load(request)
        request.state.session = session
        response = await call_next(request)
        self.manager.apply_cookie(response, session)
        return response
