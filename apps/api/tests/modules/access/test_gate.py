"""
Tests for the access gate and the route table.
"""

import pytest

from seminar_hub.modules.access.gate import AccessDecision, authorize
from seminar_hub.modules.access.routes import authorize_route, required_role_for
from seminar_hub.modules.users.models import UserRole


def test_resolving_is_pending_regardless_of_session(admin_session):
    assert authorize(None, resolving=True) == AccessDecision.PENDING
    assert authorize(admin_session, UserRole.ADMIN, resolving=True) == AccessDecision.PENDING


def test_no_session_redirects_to_login():
    assert authorize(None) == AccessDecision.REDIRECT_TO_LOGIN
    assert authorize(None, UserRole.ADMIN) == AccessDecision.REDIRECT_TO_LOGIN


def test_wrong_role_is_denied_not_redirected(teacher_session):
    assert authorize(teacher_session, UserRole.ADMIN) == AccessDecision.DENIED


def test_matching_role_renders(admin_session, specialist_session):
    assert authorize(admin_session, UserRole.ADMIN) == AccessDecision.RENDER
    assert authorize(specialist_session, UserRole.SPECIALIST) == AccessDecision.RENDER


def test_no_requirement_renders_for_any_signed_in_role(student_session):
    assert authorize(student_session) == AccessDecision.RENDER


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/admin", UserRole.ADMIN),
        ("/admin/users", UserRole.ADMIN),
        ("/admin/logs/", UserRole.ADMIN),
        ("/student-notes", UserRole.SPECIALIST),
        ("/intervention-plans?student=1", UserRole.SPECIALIST),
        ("/dashboard", None),
        ("/administrator", None),
    ],
)
def test_required_role_for(path, expected):
    assert required_role_for(path) == expected


def test_login_is_public():
    assert authorize_route(None, "/login") == AccessDecision.RENDER


def test_admin_cannot_open_specialist_views(admin_session):
    assert authorize_route(admin_session, "/student-notes") == AccessDecision.DENIED


def test_teacher_on_admin_view_is_denied(teacher_session):
    assert authorize_route(teacher_session, "/admin/tenants") == AccessDecision.DENIED


def test_signed_out_on_protected_view_redirects():
    assert authorize_route(None, "/dashboard") == AccessDecision.REDIRECT_TO_LOGIN


def test_route_check_while_resolving_is_pending(specialist_session):
    assert authorize_route(specialist_session, "/student-notes", resolving=True) == AccessDecision.PENDING
