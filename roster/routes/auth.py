"""
Authentication helpers
Resolves the bearer token of a request to the acting user

Reads are open. Every mutating endpoint is wrapped in
require_authentication(), which rejects requests whose token cannot be
verified with a 401.

The verifier lives in app.extensions['identity_verifier']. The default
RedisSessionVerifier looks tokens up in the shared session store, where the
login service keeps ``session:<token>`` -> JSON ``{"uid": ..., "email": ...}``.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import wraps
from typing import Dict, Optional
import json
import urllib.parse

import redis
from flask import current_app, g, request

from roster.error_handlers.exceptions import AuthenticationException


@dataclass(frozen=True)
class Actor:
    uid: str
    email: Optional[str] = None

    def to_dict(self):
        return {'uid': self.uid, 'email': self.email}


class IdentityVerifier(ABC):
    """Maps a bearer token to an Actor, or None when the token is not valid."""

    @abstractmethod
    def verify(self, token: str) -> Optional[Actor]:
        """Actor for the token, or None."""


class RedisSessionVerifier(IdentityVerifier):
    """
    Tokens are session ids in Redis

    Args:
        redis_url: Redis connection URL
        password: Injected into the URL when the URL carries none
        key_prefix: Session key prefix
    """

    def __init__(self, redis_url: str, password: Optional[str] = None, key_prefix: str = 'session:'):
        self.redis_url = redis_url
        self.password = password
        self.key_prefix = key_prefix
        self._client = None

    @property
    def client(self):
        # Lazy so the app starts without a reachable Redis
        if self._client is None:
            url = self.redis_url
            if self.password and '@' not in url:
                parts = url.split('://')
                if len(parts) == 2:
                    url = f"{parts[0]}://:{urllib.parse.quote_plus(self.password)}@{parts[1]}"
            self._client = redis.from_url(url, decode_responses=True)
        return self._client

    def verify(self, token: str) -> Optional[Actor]:
        try:
            raw = self.client.get(f"{self.key_prefix}{token}")
        except redis.RedisError as e:
            current_app.logger.error(f"Redis session read error: {e}")
            return None
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            current_app.logger.warning(f"Session {token[:8]}... holds malformed data")
            return None
        uid = data.get('uid') if isinstance(data, dict) else None
        if not uid:
            return None
        return Actor(uid=str(uid), email=data.get('email'))


class StaticTokenVerifier(IdentityVerifier):
    """Fixed token table, for service accounts and local runs."""

    def __init__(self, tokens: Dict[str, Actor]):
        self.tokens = dict(tokens)

    def verify(self, token: str) -> Optional[Actor]:
        return self.tokens.get(token)


def init_identity(app, verifier: Optional[IdentityVerifier] = None) -> IdentityVerifier:
    if verifier is None:
        verifier = RedisSessionVerifier(
            app.config.get('REDIS_URL', 'redis://localhost:6379/0'),
            password=app.config.get('REDIS_PASSWORD'),
            key_prefix=app.config.get('SESSION_KEY_PREFIX', 'session:'),
        )
    app.extensions['identity_verifier'] = verifier
    return verifier


def _bearer_token() -> Optional[str]:
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def get_current_actor() -> Optional[Actor]:
    """Verified actor of the current request, resolved once per request."""
    if 'actor' not in g:
        token = _bearer_token()
        verifier = current_app.extensions.get('identity_verifier')
        g.actor = verifier.verify(token) if token and verifier else None
    return g.actor


def require_authentication():
    """Decorator to require a verified actor for mutating routes"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            actor = get_current_actor()
            if actor is None:
                current_app.logger.warning(
                    f"Unauthenticated {request.method} {request.path} from {request.remote_addr}"
                )
                raise AuthenticationException('Authentication required')
            return f(*args, **kwargs)
        return decorated_function
    return decorator
