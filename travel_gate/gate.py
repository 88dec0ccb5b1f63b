"""
Access gate for the admin surface.

Two stages protect ``/admin``: a shared access secret guards the whole
surface, then a user session guards everything except the pages needed to
obtain one. The gate is a pure function from a ``RequestContext`` to a
decision, evaluated against ``ACCESS_RULES`` in order.
"""
import logging
import typing as tp

from .schemas import AccessDecision, Allow, RedirectTo, RequestContext

logger = logging.getLogger(__name__)

ADMIN_ROOT = "/admin"
ACCESS_PAGE = "/admin/access"
LOGIN_PAGE = "/admin/login"
DASHBOARD_PAGE = "/admin/dashboard"

# Reachable with the access secret but without a session.
SESSIONLESS_PAGES: tp.FrozenSet[str] = frozenset(
    {LOGIN_PAGE, "/admin/forgot-password", "/admin/reset-password"}
)


class AccessRule(tp.NamedTuple):
    name: str
    applies: tp.Callable[[RequestContext], bool]
    decide: tp.Callable[[RequestContext], AccessDecision]


ALLOW = Allow()

ACCESS_RULES: tp.Tuple[AccessRule, ...] = (
    # Runs before the secret check; the secret applies on the next hop.
    AccessRule(
        "admin-root",
        lambda ctx: ctx.path == ADMIN_ROOT,
        lambda ctx: RedirectTo(target=DASHBOARD_PAGE),
    ),
    AccessRule(
        "access-page",
        lambda ctx: ctx.path == ACCESS_PAGE,
        lambda ctx: ALLOW,
    ),
    AccessRule(
        "missing-access-key",
        lambda ctx: not ctx.has_access_cookie,
        lambda ctx: RedirectTo(target=ACCESS_PAGE, callback_url=ctx.path),
    ),
    AccessRule(
        "signed-in-login",
        lambda ctx: ctx.has_session_cookie and ctx.path == LOGIN_PAGE,
        lambda ctx: RedirectTo(target=DASHBOARD_PAGE),
    ),
    AccessRule(
        "missing-session",
        lambda ctx: not ctx.has_session_cookie and ctx.path not in SESSIONLESS_PAGES,
        lambda ctx: RedirectTo(target=LOGIN_PAGE, callback_url=ctx.path),
    ),
)


def evaluate(
    context: RequestContext,
    rules: tp.Sequence[AccessRule] = ACCESS_RULES,
) -> AccessDecision:
    """Returns the decision of the first rule matching ``context``.

    Requests no rule matches are allowed.
    """
    for rule in rules:
        if rule.applies(context):
            decision = rule.decide(context)
            logger.debug("Rule %s matched %s: %s", rule.name, context.path, decision)
            return decision

    logger.debug("No rule matched %s, allowing", context.path)
    return ALLOW


class AccessGate:
    """Callable wrapper around :func:`evaluate` with a fixed rule table."""

    def __init__(self, rules: tp.Sequence[AccessRule] = ACCESS_RULES) -> None:
        self.rules = tuple(rules)

    def __call__(self, context: RequestContext) -> AccessDecision:
        return evaluate(context, self.rules)
