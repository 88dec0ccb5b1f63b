"""Tests for the admin access gate decision table."""

import typing as tp

import pytest

from travel_gate.gate import ACCESS_RULES, AccessGate, evaluate
from travel_gate.schemas import Allow, RedirectTo, RequestContext

ADMIN_PATHS = [
    "/admin/dashboard",
    "/admin/login",
    "/admin/forgot-password",
    "/admin/reset-password",
    "/admin/flights",
    "/admin/flights/42/edit",
]


def ctx(path: str, access: bool = False, session: bool = False) -> RequestContext:
    return RequestContext(
        path=path, has_access_cookie=access, has_session_cookie=session
    )


@pytest.mark.parametrize("access", [True, False])
@pytest.mark.parametrize("session", [True, False])
def test_admin_root_redirects_to_dashboard_before_secret_check(
    access: bool, session: bool
) -> None:
    decision = evaluate(ctx("/admin", access, session))

    assert decision == RedirectTo(target="/admin/dashboard")
    assert decision.location == "/admin/dashboard"


@pytest.mark.parametrize("access", [True, False])
@pytest.mark.parametrize("session", [True, False])
def test_access_page_always_allowed(access: bool, session: bool) -> None:
    assert evaluate(ctx("/admin/access", access, session)) == Allow()


@pytest.mark.parametrize("session", [True, False])
@pytest.mark.parametrize("path", ADMIN_PATHS)
def test_missing_access_key_redirects_to_access_page(path: str, session: bool) -> None:
    decision = evaluate(ctx(path, access=False, session=session))

    assert isinstance(decision, RedirectTo)
    assert decision.target == "/admin/access"
    assert decision.callback_url == path


@pytest.mark.parametrize(
    "path, session, expected",
    [
        ("/admin/login", False, Allow()),
        ("/admin/login", True, RedirectTo(target="/admin/dashboard")),
        (
            "/admin/dashboard",
            False,
            RedirectTo(target="/admin/login", callback_url="/admin/dashboard"),
        ),
        ("/admin/dashboard", True, Allow()),
        ("/admin/forgot-password", False, Allow()),
        ("/admin/reset-password", False, Allow()),
        ("/admin/forgot-password", True, Allow()),
        (
            "/admin/flights/42/edit",
            False,
            RedirectTo(target="/admin/login", callback_url="/admin/flights/42/edit"),
        ),
        ("/admin/flights/42/edit", True, Allow()),
    ],
)
def test_session_stage(
    path: str, session: bool, expected: tp.Union[Allow, RedirectTo]
) -> None:
    assert evaluate(ctx(path, access=True, session=session)) == expected


def test_first_visit_takes_two_hops() -> None:
    first = evaluate(ctx("/admin"))
    assert isinstance(first, RedirectTo)

    second = evaluate(ctx(first.target))
    assert second == RedirectTo(target="/admin/access", callback_url="/admin/dashboard")
    assert second.location == "/admin/access?callbackUrl=%2Fadmin%2Fdashboard"


@pytest.mark.parametrize(
    "callback, expected_query",
    [
        ("/admin/dashboard", "callbackUrl=%2Fadmin%2Fdashboard"),
        ("/admin/flights/a b", "callbackUrl=%2Fadmin%2Fflights%2Fa+b"),
        ("/admin/x&y=1", "callbackUrl=%2Fadmin%2Fx%26y%3D1"),
    ],
)
def test_callback_is_url_encoded(callback: str, expected_query: str) -> None:
    decision = RedirectTo(target="/admin/login", callback_url=callback)

    assert decision.location == f"/admin/login?{expected_query}"


def test_rule_order() -> None:
    assert [rule.name for rule in ACCESS_RULES] == [
        "admin-root",
        "access-page",
        "missing-access-key",
        "signed-in-login",
        "missing-session",
    ]


def test_access_gate_uses_custom_rules() -> None:
    gate = AccessGate(rules=ACCESS_RULES[:1])

    assert gate(ctx("/admin/dashboard")) == Allow()
    assert gate(ctx("/admin")) == RedirectTo(target="/admin/dashboard")
