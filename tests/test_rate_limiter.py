from cloakroom.utils.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_is_allowed_counts_every_call():
    clock = FakeClock()
    limiter = RateLimiter(max_attempts=2, window_seconds=60, clock=clock)
    assert limiter.is_allowed("ip")
    assert limiter.is_allowed("ip")
    assert not limiter.is_allowed("ip")
    assert limiter.is_allowed("other-ip")


def test_record_and_is_blocked():
    clock = FakeClock()
    limiter = RateLimiter(max_attempts=2, window_seconds=60, clock=clock)
    assert not limiter.is_blocked("ip")
    limiter.record("ip")
    assert not limiter.is_blocked("ip")
    limiter.record("ip")
    assert limiter.is_blocked("ip")
    assert limiter.retry_after("ip") == 60


def test_window_slides():
    clock = FakeClock()
    limiter = RateLimiter(max_attempts=1, window_seconds=60, clock=clock)
    limiter.record("ip")
    clock.now += 30
    assert limiter.is_blocked("ip")
    assert limiter.retry_after("ip") == 30
    clock.now += 30
    assert not limiter.is_blocked("ip")
    assert limiter.retry_after("ip") == 0


def test_reset():
    limiter = RateLimiter(max_attempts=1, window_seconds=60)
    limiter.record("a")
    limiter.record("b")
    limiter.reset("a")
    assert not limiter.is_blocked("a")
    assert limiter.is_blocked("b")
    limiter.reset()
    assert not limiter.is_blocked("b")
