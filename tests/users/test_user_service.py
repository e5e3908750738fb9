from __future__ import annotations

from datetime import date

import pytest

from vacation_tracker.core.enums import Role
from vacation_tracker.core.exceptions import AuthenticationError, Forbidden, NotFound, ValidationError


def test_authenticate_with_valid_credentials(container, db):
    user_id = db.add_user(username="alice", password="secret123")

    session_user = container.auth_service.authenticate("  alice ", "secret123")

    assert session_user.user_id == user_id
    assert session_user.role == Role.EMPLOYEE


@pytest.mark.parametrize("username,password", [("alice", "wrong"), ("nobody", "secret123"), ("", "")])
def test_authenticate_rejects_bad_credentials(container, db, username, password):
    db.add_user(username="alice", password="secret123")

    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate(username, password)


def test_placeholder_hash_never_authenticates(container, db):
    db.add_user(username="legacy")

    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("legacy", "CHANGE_ME")


def test_create_employee_uses_policy_default(container, db):
    container.policy_store.set_default_vacation_days(current_role=Role.ADMIN, days=22)

    user_id = container.user_service.create_employee(
        current_role=Role.ADMIN, full_name="Carol Diaz", username="carol", password="hunter22"
    )

    user = db.users[user_id]
    assert (user.role, user.total_days, user.used_days) == (Role.EMPLOYEE, 22, 0)
    assert container.auth_service.authenticate("carol", "hunter22").user_id == user_id


def test_create_employee_validation(container, db):
    db.add_user(username="alice")
    service = container.user_service

    with pytest.raises(ValidationError):
        service.create_employee(current_role=Role.ADMIN, full_name="A", username="alice", password="secret123")
    with pytest.raises(ValidationError):
        service.create_employee(current_role=Role.ADMIN, full_name="B", username="bob", password="123")
    with pytest.raises(ValidationError):
        service.create_employee(current_role=Role.ADMIN, full_name=" ", username="bob", password="secret123")
    with pytest.raises(Forbidden):
        service.create_employee(current_role=Role.EMPLOYEE, full_name="B", username="bob", password="secret123")


def test_profile_includes_balance_for_employees(container, employee, admin):
    profile = container.user_service.get_profile(user_id=employee)
    admin_profile = container.user_service.get_profile(user_id=admin)

    assert profile["remaining_days"] == 25
    assert "remaining_days" not in admin_profile
    assert admin_profile["role"] == "admin"


def test_total_days_cannot_drop_below_used(container, db):
    user_id = db.add_user(total_days=25, used_days=10)
    service = container.user_service

    with pytest.raises(ValidationError):
        service.update_total_days(current_role=Role.ADMIN, user_id=user_id, total_days=9)

    balance = service.update_total_days(current_role=Role.ADMIN, user_id=user_id, total_days=10)
    assert balance.remaining_days == 0


def test_total_days_only_for_employees(container, admin):
    with pytest.raises(ValidationError):
        container.user_service.update_total_days(current_role=Role.ADMIN, user_id=admin, total_days=10)
    with pytest.raises(NotFound):
        container.user_service.update_total_days(current_role=Role.ADMIN, user_id=999, total_days=10)


def test_delete_user_removes_requests(container, db, employee, admin):
    container.vacation_service.create_request(
        user_id=employee, start_date=date(2025, 6, 9), end_date=date(2025, 6, 13)
    )

    container.user_service.delete_user(current_role=Role.ADMIN, user_id=employee)

    assert employee not in db.users
    assert db.requests == {}
    with pytest.raises(ValidationError):
        container.user_service.delete_user(current_role=Role.ADMIN, user_id=admin)


def test_admin_view_lists_everyone(container, employee, admin):
    rows = container.user_service.list_admin_view()

    assert {row["user_id"] for row in rows} == {employee, admin}
