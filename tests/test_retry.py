import pytest

from agrirent.services.retry import backoff_delays, retrieve_with_backoff, retrieve_from_config


def test_backoff_delays_grow_and_cap():
    assert backoff_delays(5, 0.5) == [0.5, 1.0, 2.0, 4.0]
    assert backoff_delays(5, 0.5, max_delay=1.5) == [0.5, 1.0, 1.5, 1.5]
    assert backoff_delays(1, 0.5) == []


def test_returns_first_hit_and_sleeps_between_misses():
    answers = iter([None, None, 'booking'])
    slept = []

    result = retrieve_with_backoff(lambda: next(answers), attempts=5, initial_delay=0.5, sleep=slept.append)

    assert result == 'booking'
    assert slept == [0.5, 1.0]


def test_gives_up_after_attempts():
    calls = []
    slept = []

    def fetch():
        calls.append(1)
        return None

    assert retrieve_with_backoff(fetch, attempts=3, initial_delay=0.1, sleep=slept.append) is None
    assert len(calls) == 3
    assert slept == [0.1, 0.2]


def test_falsy_values_count_as_found():
    assert retrieve_with_backoff(lambda: 0, sleep=pytest.fail) == 0


def test_attempts_must_be_positive():
    with pytest.raises(ValueError):
        retrieve_with_backoff(lambda: None, attempts=0)


def test_retrieve_from_config_uses_settings():
    config = {'READBACK_ATTEMPTS': 2, 'READBACK_INITIAL_DELAY': 3.0, 'READBACK_MAX_DELAY': 1.0}
    slept = []
    assert retrieve_from_config(lambda: None, config, sleep=slept.append) is None
    assert slept == [1.0]
