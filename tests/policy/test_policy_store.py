from __future__ import annotations

import pytest

from vacation_tracker.core.constants import DEFAULT_VACATION_DAYS
from vacation_tracker.core.enums import Role
from vacation_tracker.core.exceptions import Forbidden, ValidationError
from vacation_tracker.policy.model import Policy


def test_defaults(container):
    policy = container.policy_store.get()

    assert policy == Policy(exclude_weekends=True, default_vacation_days=DEFAULT_VACATION_DAYS)


def test_admin_can_toggle_weekends(container, db):
    updated = container.policy_store.set(current_role=Role.ADMIN, exclude_weekends=False)

    assert updated.exclude_weekends is False
    assert db.policy.exclude_weekends is False
    assert container.policy_store.get().exclude_weekends is False


def test_changes_are_seen_by_other_readers(container, db):
    # Another worker writes straight to storage.
    db.policy = Policy(exclude_weekends=False, default_vacation_days=18)

    assert container.policy_store.get().default_vacation_days == 18


def test_employee_cannot_change_policy(container, db):
    with pytest.raises(Forbidden):
        container.policy_store.set(current_role=Role.EMPLOYEE, exclude_weekends=False)

    assert db.policy.exclude_weekends is True


def test_default_days_must_be_non_negative(container):
    with pytest.raises(ValidationError):
        container.policy_store.set_default_vacation_days(current_role=Role.ADMIN, days=-3)

    updated = container.policy_store.set_default_vacation_days(current_role=Role.ADMIN, days=30)
    assert updated == Policy(exclude_weekends=True, default_vacation_days=30)
