"""Connection identity: HS256 tokens carrying a ``username`` claim."""
import datetime as dt
from typing import Optional

import jwt

from quizroom.errors import AuthError


class JwtIdentityVerifier:
    def __init__(self, secret: str, algorithm: str = 'HS256', ttl_days: int = 30):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl_days = ttl_days

    def verify(self, token: Optional[str]) -> str:
        """Return the username carried by ``token`` or raise ``AuthError``."""
        if not token:
            raise AuthError('Missing token')
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise AuthError('Token expired') from exc
        except jwt.InvalidTokenError as exc:
            raise AuthError('Invalid token') from exc
        username = claims.get('username')
        if not isinstance(username, str) or not username.strip():
            raise AuthError('Token has no username')
        return username

    def issue(self, username: str) -> str:
        now = dt.datetime.now(dt.timezone.utc)
        claims = {
            'username': username,
            'iat': now,
            'exp': now + dt.timedelta(days=self.ttl_days),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)
