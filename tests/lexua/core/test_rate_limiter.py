"""Tests for request pacing."""

from lexua.core.rate_limiter import AdaptiveRateLimiter


class FakeClock:
    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def make_limiter(min_delay=0.5):
    clock = FakeClock()
    return AdaptiveRateLimiter(min_delay=min_delay, clock=clock, sleep=clock.sleep), clock


def test_first_request_is_not_delayed():
    limiter, clock = make_limiter()

    assert limiter.wait() == 0.0
    assert clock.sleeps == []


def test_back_to_back_requests_respect_minimum_delay():
    limiter, clock = make_limiter()

    limiter.wait()
    limiter.wait()

    assert clock.sleeps == [0.5]


def test_no_delay_once_enough_time_has_passed():
    limiter, clock = make_limiter()

    limiter.wait()
    clock.now += 2
    limiter.wait()

    assert clock.sleeps == []


def test_partial_delay_when_some_time_has_passed():
    limiter, clock = make_limiter()

    limiter.wait()
    clock.now += 0.25
    limiter.wait()

    assert clock.sleeps == [0.25]


def test_rate_limit_with_retry_after():
    limiter, _ = make_limiter()

    limiter.record_rate_limit(7)

    assert limiter.get_current_delay() == 7.0


def test_rate_limit_without_retry_after_backs_off():
    limiter, _ = make_limiter(min_delay=1.0)

    limiter.record_rate_limit()

    assert limiter.get_current_delay() == 2.5
    assert limiter.get_stats()["rate_limit_count"] == 1


def test_delay_decays_back_to_minimum_after_success():
    limiter, _ = make_limiter()
    limiter.record_rate_limit(1)

    for _ in range(200):
        limiter.record_success()

    assert limiter.get_current_delay() == 0.5
