import typing as tp
from enum import Enum
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field
from starlette.requests import HTTPConnection

if tp.TYPE_CHECKING:
    from .config import GateSettings

V = tp.TypeVar("V")

CALLBACK_PARAM = "callbackUrl"


class RouteKind(str, Enum):
    """Classification of a request path."""

    PUBLIC = "public"
    ADMIN = "admin"
    UNRECOGNIZED = "unrecognized"


class CacheEntry(tp.Generic[V]):
    """A stored value together with the moment it was written and its TTL.

    Args:
        value: Cached payload
        stored_at: Clock reading taken when the entry was written
        ttl: Lifetime in seconds
    """

    __slots__ = ("value", "stored_at", "ttl")

    def __init__(self, value: V, stored_at: float, ttl: float) -> None:
        self.value = value
        self.stored_at = stored_at
        self.ttl = ttl

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at > self.ttl

    def __repr__(self) -> str:
        return f"CacheEntry(stored_at={self.stored_at!r}, ttl={self.ttl!r})"


class RequestContext(BaseModel):
    """Everything the access gate needs to know about one request."""

    model_config = ConfigDict(frozen=True)

    path: str
    has_access_cookie: bool = False
    has_session_cookie: bool = False

    @classmethod
    def from_request(
        cls, request: HTTPConnection, settings: "GateSettings"
    ) -> "RequestContext":
        """Derives the gate inputs from the request cookies.

        The access cookie counts only when it equals the configured secret.
        The session cookie counts when it is present and non-empty.
        """
        access_value = request.cookies.get(settings.access_cookie, "")
        session_value = request.cookies.get(settings.session_cookie, "")

        return cls(
            path=request.scope["path"],
            has_access_cookie=settings.access_key_matches(access_value),
            has_session_cookie=bool(session_value),
        )


class Allow(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: tp.Literal["allow"] = "allow"


class RedirectTo(BaseModel):
    """Redirect decision.

    Attributes:
        target: Path to redirect to
        callback_url: Originally requested path, echoed back as ``callbackUrl``
    """

    model_config = ConfigDict(frozen=True)

    kind: tp.Literal["redirect"] = "redirect"
    target: str
    callback_url: str | None = None

    @property
    def location(self) -> str:
        if self.callback_url is None:
            return self.target
        return f"{self.target}?{urlencode({CALLBACK_PARAM: self.callback_url})}"


AccessDecision = tp.Annotated[Allow | RedirectTo, Field(discriminator="kind")]
