from __future__ import annotations

from datetime import date, datetime

import pytest

from src.timeclock.timeclock.core.enums import PTOStatus, Role
from src.timeclock.timeclock.core.exceptions import (
    AuthorizationError,
    BusinessRuleError,
    NotFoundError,
    ValidationError,
)
from src.timeclock.timeclock.pto.service import PTOService

TODAY = date(2026, 3, 1)


@pytest.fixture
def svc(pto_repo, users):
    return PTOService(pto_repo, users)


def test_create_request_starts_pending(svc, staff):
    req = svc.create_request(user_id=staff.user_id, request_date=date(2026, 3, 20), hours=8, reason=" Trip ", today=TODAY)

    assert req.status == PTOStatus.PENDING
    assert req.expiry_year == 2026
    assert req.reason == "Trip"
    assert req.to_json()["user_name"] == "Jane Doe"


def test_request_for_today_is_allowed(svc, staff):
    assert svc.create_request(user_id=staff.user_id, request_date=TODAY, hours=1, reason="Dentist", today=TODAY)


@pytest.mark.parametrize(
    "kwargs,message",
    [
        ({"request_date": date(2026, 2, 28)}, "Request date must be in the future"),
        ({"hours": 0}, "PTO hours must be between 1 and 8"),
        ({"hours": 9}, "PTO hours must be between 1 and 8"),
        ({"hours": 2.5}, "Hours must be a whole number"),
        ({"reason": "   "}, "Reason is required"),
    ],
)
def test_create_request_validation(svc, staff, kwargs, message):
    args = {"request_date": date(2026, 3, 20), "hours": 4, "reason": "Trip", **kwargs}

    with pytest.raises(ValidationError, match=message):
        svc.create_request(user_id=staff.user_id, today=TODAY, **args)


def test_create_request_unknown_user(svc):
    with pytest.raises(NotFoundError):
        svc.create_request(user_id=42, request_date=date(2026, 3, 20), hours=4, reason="Trip", today=TODAY)


def test_monthly_quota_counts_approved_hours_only(svc, pto_repo, staff):
    pto_repo.add(user_id=staff.user_id, request_date=date(2026, 3, 2), hours=8, status=PTOStatus.APPROVED)
    pto_repo.add(user_id=staff.user_id, request_date=date(2026, 3, 3), hours=2, status=PTOStatus.APPROVED)
    pto_repo.add(user_id=staff.user_id, request_date=date(2026, 3, 4), hours=8, status=PTOStatus.PENDING)
    pto_repo.add(user_id=staff.user_id, request_date=date(2026, 3, 5), hours=8, status=PTOStatus.DENIED)

    with pytest.raises(BusinessRuleError, match="You have 6 PTO hours remaining for March 2026"):
        svc.create_request(user_id=staff.user_id, request_date=date(2026, 3, 25), hours=8, reason="Trip", today=TODAY)

    # exactly at the limit
    assert svc.create_request(user_id=staff.user_id, request_date=date(2026, 3, 25), hours=6, reason="Trip", today=TODAY)
    # another month is unaffected
    assert svc.create_request(user_id=staff.user_id, request_date=date(2026, 4, 1), hours=8, reason="Trip", today=TODAY)


def test_approve_pending_request(svc, pto_repo, staff, admin):
    req = pto_repo.add(user_id=staff.user_id, request_date=date(2026, 3, 20), hours=4)
    now = datetime(2026, 3, 2, 10, 0)

    updated = svc.update_status(
        current_role=Role.ADMIN,
        request_id=req.request_id,
        approver_id=admin.user_id,
        status="approved",
        now=now,
    )

    assert updated.status == PTOStatus.APPROVED
    assert updated.approved_by == admin.user_id
    assert updated.approval_date == now


def test_decisions_are_terminal(svc, pto_repo, staff, admin):
    req = pto_repo.add(user_id=staff.user_id, request_date=date(2026, 3, 20), hours=4)
    svc.update_status(current_role=Role.ADMIN, request_id=req.request_id, approver_id=admin.user_id, status="denied")

    with pytest.raises(BusinessRuleError, match="already been processed"):
        svc.update_status(current_role=Role.ADMIN, request_id=req.request_id, approver_id=admin.user_id, status="approved")


@pytest.mark.parametrize("status", ["pending", "maybe", None])
def test_update_status_rejects_other_targets(svc, pto_repo, staff, admin, status):
    req = pto_repo.add(user_id=staff.user_id, request_date=date(2026, 3, 20), hours=4)

    with pytest.raises(ValidationError, match="Invalid status"):
        svc.update_status(current_role=Role.ADMIN, request_id=req.request_id, approver_id=admin.user_id, status=status)


def test_update_status_requires_admin_and_existing_request(svc, admin):
    with pytest.raises(AuthorizationError):
        svc.update_status(current_role=Role.USER, request_id=1, approver_id=admin.user_id, status="approved")
    with pytest.raises(NotFoundError, match="PTO request not found"):
        svc.update_status(current_role=Role.ADMIN, request_id=99, approver_id=admin.user_id, status="approved")


def test_monthly_and_yearly_summaries(svc, pto_repo, staff):
    pto_repo.add(user_id=staff.user_id, request_date=date(2026, 3, 2), hours=8, status=PTOStatus.APPROVED)
    pto_repo.add(user_id=staff.user_id, request_date=date(2026, 7, 2), hours=5, status=PTOStatus.APPROVED)
    pto_repo.add(user_id=staff.user_id, request_date=date(2026, 7, 9), hours=3, status=PTOStatus.PENDING)
    pto_repo.add(user_id=staff.user_id, request_date=date(2025, 7, 9), hours=3, status=PTOStatus.APPROVED)

    assert svc.monthly_count(staff.user_id, "2026", "3") == {"count": 8}
    assert svc.monthly_count(staff.user_id, 2026, 8) == {"count": 0}
    assert svc.yearly_hours(staff.user_id, 2026) == {
        "total_hours_used": 13,
        "yearly_limit": 192,
        "remaining_hours": 179,
    }


@pytest.mark.parametrize("year,month", [(2026, 0), (2026, 13), ("abc", 1)])
def test_monthly_count_rejects_bad_month(svc, staff, year, month):
    with pytest.raises(ValidationError, match="Invalid year or month"):
        svc.monthly_count(staff.user_id, year, month)


def test_list_all_requests_filters_status_and_search(svc, pto_repo, staff, admin):
    pto_repo.add(user_id=staff.user_id, request_date=date(2026, 3, 2), hours=8, reason="Beach", status=PTOStatus.APPROVED)
    pto_repo.add(user_id=staff.user_id, request_date=date(2026, 4, 2), hours=4, reason="Doctor")
    pto_repo.add(user_id=admin.user_id, request_date=date(2026, 4, 3), hours=2, reason="Errand")

    pending = svc.list_all_requests(current_role=Role.ADMIN, status="pending")
    assert [r.reason for r in pending] == ["Errand", "Doctor"]

    by_name = svc.list_all_requests(current_role=Role.ADMIN, search="jane beach")
    assert {r.reason for r in by_name} == {"Beach", "Doctor"}

    with pytest.raises(AuthorizationError):
        svc.list_all_requests(current_role=Role.USER)
    with pytest.raises(ValidationError, match="Invalid status"):
        svc.list_all_requests(current_role=Role.ADMIN, status="weird")


def test_list_user_requests_only_own(svc, pto_repo, staff, admin):
    pto_repo.add(user_id=staff.user_id, request_date=date(2026, 3, 2), hours=8, reason="Beach")
    pto_repo.add(user_id=admin.user_id, request_date=date(2026, 4, 3), hours=2, reason="Errand")

    assert [r.reason for r in svc.list_user_requests(staff.user_id)] == ["Beach"]
    assert svc.list_user_requests(staff.user_id, search="errand") == []


def test_user_search_ignores_own_name(svc, pto_repo, staff):
    pto_repo.add(user_id=staff.user_id, request_date=date(2026, 1, 12), hours=8, reason="Ski trip")
    pto_repo.add(user_id=staff.user_id, request_date=date(2026, 3, 12), hours=4, reason="Moving")

    assert [r.request_date for r in svc.list_user_requests(staff.user_id, search="jan")] == [date(2026, 1, 12)]
    assert svc.list_user_requests(staff.user_id, search="doe") == []


def test_underscored_number_is_not_an_hours_match(svc, pto_repo, staff):
    pto_repo.add(user_id=staff.user_id, request_date=date(2026, 3, 12), hours=8, reason="Moving")

    assert svc.list_user_requests(staff.user_id, search="0_8") == []
    assert len(svc.list_user_requests(staff.user_id, search="8")) == 1
