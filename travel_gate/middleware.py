import logging
import typing as tp

from starlette.requests import HTTPConnection
from starlette.responses import RedirectResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from .config import GateSettings
from .gate import AccessGate
from .routes import RouteClassifier
from .schemas import Allow, RedirectTo, RequestContext, RouteKind

logger = logging.getLogger(__name__)

HOME = "/"


class AdmissionMiddleware:
    """Decides for every HTTP request whether it reaches the application.

    1. Paths under ``settings.bypass_paths`` pass through untouched
    2. The path is classified as public, admin or unrecognized
    3. Unrecognized paths are redirected home
    4. Admin paths are handed to the access gate, whose decision is final

    Args:
        app: ASGI application to wrap
        settings: Gate settings, loaded from the environment when omitted
        classifier: Route classifier
        gate: Access gate for admin paths
    """

    def __init__(
        self,
        app: ASGIApp,
        settings: tp.Optional[GateSettings] = None,
        classifier: tp.Optional[RouteClassifier] = None,
        gate: tp.Optional[AccessGate] = None,
    ) -> None:
        self.app = app
        self.settings = settings or GateSettings.from_env()
        self.classifier = classifier or RouteClassifier()
        self.gate = gate or AccessGate()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        connection = HTTPConnection(scope)
        path = scope["path"]

        if self.settings.is_bypassed(path):
            await self.app(scope, receive, send)
            return

        decision = self.admit(connection)
        if isinstance(decision, RedirectTo):
            logger.debug("Redirecting %s to %s", path, decision.location)
            response = RedirectResponse(decision.location)
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)

    def admit(self, connection: HTTPConnection) -> Allow | RedirectTo:
        path = connection.scope["path"]
        kind = self.classifier.classify(path)

        if kind is RouteKind.UNRECOGNIZED:
            return RedirectTo(target=HOME)

        if kind is RouteKind.PUBLIC:
            return Allow()

        context = RequestContext.from_request(connection, self.settings)
        return self.gate(context)
