from __future__ import annotations

from datetime import date

from vacation_tracker.core.enums import RequestStatus
from vacation_tracker.vacations.overlap import OverlapDetector, ranges_overlap


def test_shared_boundary_day_overlaps():
    assert ranges_overlap(date(2025, 6, 10), date(2025, 6, 14), date(2025, 6, 14), date(2025, 6, 20))
    assert ranges_overlap(date(2025, 6, 14), date(2025, 6, 20), date(2025, 6, 10), date(2025, 6, 14))


def test_adjacent_ranges_do_not_overlap():
    assert not ranges_overlap(date(2025, 6, 10), date(2025, 6, 14), date(2025, 6, 15), date(2025, 6, 20))


def test_contained_range_overlaps():
    assert ranges_overlap(date(2025, 6, 1), date(2025, 6, 30), date(2025, 6, 10), date(2025, 6, 11))


def test_detector_finds_pending_and_approved(container, db, employee):
    detector = OverlapDetector(container.vacations_repo)
    rid = db.add_request(
        user_id=employee,
        start_date=date(2025, 6, 10),
        end_date=date(2025, 6, 13),
        business_days=4,
        status=RequestStatus.APPROVED,
    )

    conflict = detector.find_conflict(employee, date(2025, 6, 12), date(2025, 6, 16))

    assert conflict is not None
    assert conflict.request_id == rid
    assert detector.has_overlap(employee, date(2025, 6, 13), date(2025, 6, 13))


def test_rejected_requests_do_not_block(container, db, employee):
    detector = OverlapDetector(container.vacations_repo)
    db.add_request(
        user_id=employee,
        start_date=date(2025, 6, 10),
        end_date=date(2025, 6, 13),
        business_days=4,
        status=RequestStatus.REJECTED,
    )

    assert not detector.has_overlap(employee, date(2025, 6, 10), date(2025, 6, 13))


def test_other_users_do_not_block(container, db, employee):
    other = db.add_user(username="bob")
    detector = OverlapDetector(container.vacations_repo)
    db.add_request(user_id=other, start_date=date(2025, 6, 10), end_date=date(2025, 6, 13), business_days=4)

    assert not detector.has_overlap(employee, date(2025, 6, 10), date(2025, 6, 13))


def test_excluded_request_is_ignored(container, db, employee):
    detector = OverlapDetector(container.vacations_repo)
    rid = db.add_request(user_id=employee, start_date=date(2025, 6, 10), end_date=date(2025, 6, 13), business_days=4)

    assert detector.has_overlap(employee, date(2025, 6, 10), date(2025, 6, 13))
    assert not detector.has_overlap(employee, date(2025, 6, 10), date(2025, 6, 13), excluding_request_id=rid)


def test_detector_is_not_limited_to_recent_history(container, db, employee):
    detector = OverlapDetector(container.vacations_repo)
    first = db.add_request(user_id=employee, start_date=date(2025, 1, 6), end_date=date(2025, 1, 10), business_days=5)
    for day in range(1, 29):
        for month in range(2, 10):
            db.add_request(
                user_id=employee,
                start_date=date(2025, month, day),
                end_date=date(2025, month, day),
                business_days=1,
            )

    assert len(db.requests) > 200
    assert detector.find_conflict(employee, date(2025, 1, 8), date(2025, 1, 8)).request_id == first
