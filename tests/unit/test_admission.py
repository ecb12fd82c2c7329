from datetime import datetime

import pytest

from facility_booking.services.slots.admission import AdmissionDecision, evaluate_admission
from facility_booking.services.slots.calculator import calculate_day_slots
from facility_booking.services.slots.records import BookingRequest

from tests.helpers import DAY, MORNING, at, make_booking, make_facility


def _request(start, end, party_count=1, user_id="r1"):
    return BookingRequest(
        facility_id=1,
        user_id=user_id,
        starts_at=start,
        ends_at=end,
        party_count=party_count,
    )


def _evaluate(request, facility, bookings, now=MORNING):
    grid = calculate_day_slots(facility, DAY)
    return evaluate_admission(request, facility, grid, bookings, now=now, daily_cap_minutes=180)


def test_accepts_free_slot():
    result = _evaluate(_request(at(10), at(11)), make_facility(), [])

    assert result.accepted
    assert result.decision == AdmissionDecision.ACCEPTED
    assert result.booked_count == 0
    assert result.quota.remaining_minutes == 180
    assert result.message is None


def test_rejects_bounds_that_are_not_a_slot():
    result = _evaluate(_request(at(10, 30), at(11, 30)), make_facility(), [])

    assert result.decision == AdmissionDecision.REJECTED_NOT_A_SLOT
    assert result.slot is None


def test_rejects_slot_outside_window():
    result = _evaluate(_request(at(21), at(22)), make_facility(), [])

    assert result.decision == AdmissionDecision.REJECTED_NOT_A_SLOT


def test_slot_starting_now_is_not_past():
    now = datetime(2030, 1, 15, 10, 0)

    result = _evaluate(_request(at(10), at(11)), make_facility(), [], now=now)

    assert result.accepted


def test_slot_started_a_minute_ago_is_past():
    now = datetime(2030, 1, 15, 10, 1)

    result = _evaluate(_request(at(10), at(11)), make_facility(), [], now=now)

    assert result.decision == AdmissionDecision.REJECTED_PAST


@pytest.mark.parametrize("party_count,expected", [
    (2, AdmissionDecision.REJECTED_CAPACITY_EXCEEDED),
    (1, AdmissionDecision.ACCEPTED),
])
def test_capacity_boundary(party_count, expected):
    bookings = [
        make_booking(10, party_count=5, user_id="r2"),
        make_booking(10, party_count=4, user_id="r3"),
    ]

    result = _evaluate(_request(at(10), at(11), party_count=party_count), make_facility(capacity=10), bookings)

    assert result.decision == expected
    assert result.booked_count == 9


def test_quota_exceeded_for_hour_slot_with_thirty_minutes_left():
    facility = make_facility(slot_minutes=60)
    bookings = [
        make_booking(9, minutes=60),
        make_booking(12, minutes=60),
        make_booking(14, minutes=30),
    ]
    bookings[2].starts_at = at(15)
    bookings[2].ends_at = at(15, 30)

    result = _evaluate(_request(at(17), at(18)), facility, bookings)

    assert result.decision == AdmissionDecision.REJECTED_QUOTA_EXCEEDED
    assert result.quota.used_minutes == 150
    assert result.quota.remaining_minutes == 30


def test_half_hour_slot_fits_thirty_minutes_left():
    facility = make_facility(slot_minutes=30)
    bookings = [
        make_booking(9, minutes=60),
        make_booking(12, minutes=60),
        make_booking(15, minutes=30),
    ]

    result = _evaluate(_request(at(17), at(17, 30)), facility, bookings)

    assert result.accepted
    assert result.quota.remaining_minutes == 30


def test_past_wins_over_full():
    now = datetime(2030, 1, 15, 12, 0)
    bookings = [make_booking(10, party_count=10, user_id="r2")]

    result = _evaluate(_request(at(10), at(11)), make_facility(capacity=10), bookings, now=now)

    assert result.decision == AdmissionDecision.REJECTED_PAST


def test_not_a_slot_wins_over_past():
    now = datetime(2030, 1, 15, 20, 0)

    result = _evaluate(_request(at(10, 15), at(11, 15)), make_facility(), [], now=now)

    assert result.decision == AdmissionDecision.REJECTED_NOT_A_SLOT


def test_full_wins_over_quota():
    bookings = [
        make_booking(9), make_booking(11), make_booking(13),
        make_booking(15, party_count=10, user_id="r2"),
    ]

    result = _evaluate(_request(at(15), at(16)), make_facility(capacity=10), bookings)

    assert result.decision == AdmissionDecision.REJECTED_CAPACITY_EXCEEDED
