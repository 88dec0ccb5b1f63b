"""
Configuration for the admission gate.

The shared access secret is read from the process environment. A process
without it must not start: the error is raised when settings are loaded,
never while serving a request.
"""
import hmac
import logging
import os
import typing as tp

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ACCESS_KEY_ENV = "ADMIN_ACCESS_KEY"


class GateSettings(BaseModel):
    """
    Settings consumed by the admission middleware and the API router.

    Attributes:
        access_key: Shared secret compared against the access cookie
        access_cookie: Name of the access-secret cookie
        session_cookie: Name of the session-token cookie
        access_cookie_max_age: Lifetime of the access cookie set after verification
        bypass_paths: Path roots the middleware never intercepts
    """

    model_config = ConfigDict(frozen=True)

    access_key: str = Field(
        ...,
        description="Shared admin access secret",
        min_length=1,
    )
    access_cookie: str = Field(
        default="admin-access-key",
        description="Access-secret cookie name",
    )
    session_cookie: str = Field(
        default="better-auth.session_token",
        description="Session-token cookie name",
    )
    access_cookie_max_age: int = Field(
        default=7 * 24 * 60 * 60,
        description="Access cookie lifetime in seconds",
        gt=0,
    )
    bypass_paths: tp.Tuple[str, ...] = Field(
        default=("/api", "/static", "/images", "/favicon.ico"),
        description="Path roots passed through without classification",
    )

    @field_validator("bypass_paths")
    @classmethod
    def strip_trailing_slash(cls, item: tp.Tuple[str, ...]) -> tp.Tuple[str, ...]:
        return tuple(p.rstrip("/") or "/" for p in item)

    @classmethod
    def from_env(
        cls, environ: tp.Optional[tp.Mapping[str, str]] = None, **overrides: tp.Any
    ) -> "GateSettings":
        """Loads settings from the environment.

        Args:
            environ: Mapping to read from, ``os.environ`` by default
            **overrides: Values for the remaining fields

        Raises:
            ConfigurationError: if the access secret is missing or invalid
        """
        environ = os.environ if environ is None else environ
        access_key = environ.get(ACCESS_KEY_ENV)
        if not access_key:
            logger.critical("%s is not set, refusing to start", ACCESS_KEY_ENV)
            raise ConfigurationError(ACCESS_KEY_ENV)

        try:
            return cls(access_key=access_key, **overrides)
        except ValidationError as e:
            raise ConfigurationError(
                cls.__name__, message=f"Invalid gate settings: {e}"
            ) from e

    def access_key_matches(self, candidate: tp.Optional[str]) -> bool:
        """Exact, constant-time comparison with the access secret."""
        if not candidate:
            return False
        return hmac.compare_digest(candidate.encode(), self.access_key.encode())

    def is_bypassed(self, path: str) -> bool:
        for root in self.bypass_paths:
            if path == root or path.startswith(root + "/"):
                return True
        return False
