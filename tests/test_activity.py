# tests/test_activity.py
import pytest
from datetime import datetime, timedelta, timezone
from rentmatch.services.activity import (
    decompose_seconds, deactivation_countdown, evaluate_activity, countdown_until,
)

T = datetime(2024, 3, 1, 9, 30, 0, tzinfo=timezone.utc)

def accepted(id, created_at, status='Accepted'):
    return {'id': id, 'tenant_id': 4, 'status': status, 'created_at': created_at}

def test_no_accepted_requests_means_no_countdown():
    reqs = [accepted(1, T, status='Pending'), accepted(2, T, status='Rejected')]
    assert deactivation_countdown(reqs, now=T) is None
    assert deactivation_countdown([], now=T) is None

def test_countdown_right_after_accepting():
    assert deactivation_countdown([accepted(1, T)], now=T) == {
        'days': 5, 'hours': 0, 'minutes': 0, 'seconds': 0,
    }

def test_countdown_mid_way():
    now = T + timedelta(days=1, hours=2, minutes=3, seconds=4)
    assert deactivation_countdown([accepted(1, T)], now=now) == {
        'days': 3, 'hours': 21, 'minutes': 56, 'seconds': 56,
    }

def test_countdown_clamps_to_zero_after_deadline():
    now = T + timedelta(days=5, seconds=1)
    assert deactivation_countdown([accepted(1, T)], now=now) == {
        'days': 0, 'hours': 0, 'minutes': 0, 'seconds': 0,
    }

def test_zero_deactivation_period_is_not_replaced_by_default():
    zero = {'days': 0, 'hours': 0, 'minutes': 0, 'seconds': 0}
    assert deactivation_countdown([accepted(1, T)], now=T, deactivation_after=timedelta(0)) == zero
    state = evaluate_activity([accepted(1, T)], True, now=T, deactivation_after=timedelta(0))
    assert state['deactivation_at'] == T
    assert state['countdown'] == zero

def test_countdown_runs_from_oldest_accepted():
    reqs = [accepted(2, T + timedelta(days=2)), accepted(1, T)]
    now = T + timedelta(days=4)
    assert deactivation_countdown(reqs, now=now)['days'] == 1

def test_countdown_truncates_partial_seconds():
    now = T + timedelta(days=4, hours=23, minutes=59, seconds=58, microseconds=300000)
    assert deactivation_countdown([accepted(1, T)], now=now) == {
        'days': 0, 'hours': 0, 'minutes': 0, 'seconds': 1,
    }

@pytest.mark.parametrize("elapsed", [
    timedelta(0),
    timedelta(seconds=59),
    timedelta(hours=7, minutes=13, seconds=2),
    timedelta(days=2, hours=23, minutes=59, seconds=59),
    timedelta(days=4, hours=23, minutes=59, seconds=59, microseconds=999999),
])
def test_decomposition_adds_back_up(elapsed):
    now = T + elapsed
    c = deactivation_countdown([accepted(1, T)], now=now)
    total = c['days'] * 86400 + c['hours'] * 3600 + c['minutes'] * 60 + c['seconds']
    assert total == int((T + timedelta(days=5) - now).total_seconds())
    assert 0 <= c['hours'] < 24 and 0 <= c['minutes'] < 60 and 0 <= c['seconds'] < 60

def test_decompose_seconds():
    assert decompose_seconds(90061) == {'days': 1, 'hours': 1, 'minutes': 1, 'seconds': 1}
    assert decompose_seconds(0) == {'days': 0, 'hours': 0, 'minutes': 0, 'seconds': 0}

def test_countdown_until_never_negative():
    assert countdown_until(T, now=T + timedelta(hours=1)) == decompose_seconds(0)

def test_evaluate_activity_reports_flag_and_window():
    state = evaluate_activity([accepted(1, T.isoformat())], is_active=True, now=T + timedelta(days=1))
    assert state['is_active'] is True
    assert state['display_state'] == 'active'
    assert state['oldest_accepted_at'] == T
    assert state['deactivation_at'] == T + timedelta(days=5)
    assert state['countdown']['days'] == 4
    assert state['invalid'] == []

def test_evaluate_activity_flag_is_not_derived_from_countdown():
    """Past the deadline the tenant stays active until they toggle it themselves."""
    state = evaluate_activity([accepted(1, T)], is_active=True, now=T + timedelta(days=9))
    assert state['display_state'] == 'active'
    assert state['countdown'] == decompose_seconds(0)

    state = evaluate_activity([], is_active=False, now=T)
    assert state['display_state'] == 'inactive'
    assert state['countdown'] is None
    assert state['deactivation_at'] is None

def test_evaluate_activity_skips_undatable_records():
    reqs = [accepted(1, 'soon'), accepted(2, T)]
    state = evaluate_activity(reqs, is_active=True, now=T)
    assert state['oldest_accepted_at'] == T
    assert [e.record_id for e in state['invalid']] == [1]
