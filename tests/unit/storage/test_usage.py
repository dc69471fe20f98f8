import pytest

from newsel.storage import UsageTracker, confidence_for


@pytest.fixture
def tracker(tmp_path):
    return UsageTracker(tmp_path / 'usage.json')


def test_record_counts_and_confidence(tracker):
    tracker.record('x.com', success=True)
    tracker.record('x.com', success=True)
    stats = tracker.record('x.com', success=False, error='timeout')

    assert stats['usage_count'] == 3
    assert stats['success_count'] == 2
    assert stats['failure_count'] == 1
    assert stats['last_error'] == 'timeout'
    assert stats['confidence'] == pytest.approx(0.8333, abs=1e-4)
    assert tracker.get_stats('x.com')['usage_count'] == 3


def test_last_error_is_truncated(tracker):
    stats = tracker.record('x.com', success=False, error='e' * 5000)

    assert len(stats['last_error']) == 1000


def test_confidence_bounds():
    assert confidence_for(0, 0) == 0.5
    assert confidence_for(0, 4) == 0.5
    assert confidence_for(4, 4) == 1.0


def test_reset(tracker):
    tracker.record('x.com', success=True)
    tracker.record('y.com', success=True)

    tracker.reset('x.com')
    assert tracker.get_stats('x.com') is None
    assert tracker.get_stats('y.com') is not None

    tracker.reset()
    assert tracker.get_all_stats() == {}


def test_unreadable_file_is_treated_as_empty(tmp_path):
    path = tmp_path / 'usage.json'
    path.write_text('{broken')

    assert UsageTracker(path).get_all_stats() == {}


def test_success_clears_last_error(tracker):
    tracker.record('x.com', success=False, error='timeout')

    stats = tracker.record('x.com', success=True)

    assert stats['last_error'] is None
    assert stats['last_success'] == stats['last_used']
    assert tracker.get_stats('x.com')['failure_count'] == 1
