"""
Unit tests for the fixed-window rate limiter
"""

import unittest

from backoffice.database import Base, SessionLocal, engine
from backoffice.models.rate_limit import RateLimitWindow
from backoffice.ratelimit import FixedWindowRateLimiter, MemoryCounterStore, SqlCounterStore


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


class TestFixedWindowRateLimiter(unittest.TestCase):

    def setUp(self):
        self.clock = FakeClock(1000)
        self.limiter = FixedWindowRateLimiter(MemoryCounterStore(), limit=3, window_seconds=60, clock=self.clock)

    def test_allows_up_to_the_limit(self):
        results = [self.limiter.check("10.0.0.1") for _ in range(4)]

        self.assertEqual([r.allowed for r in results], [True, True, True, False])
        self.assertEqual(results[-1].count, 4)
        self.assertEqual(results[-1].limit, 3)

    def test_retry_after_points_to_next_window(self):
        # 1000 falls in the window [960, 1020)
        result = self.limiter.check("10.0.0.1")
        self.assertEqual(result.retry_after, 20)

    def test_new_window_resets_the_count(self):
        for _ in range(4):
            self.limiter.check("10.0.0.1")

        self.clock.now = 1020

        self.assertTrue(self.limiter.check("10.0.0.1").allowed)

    def test_clients_are_counted_separately(self):
        for _ in range(3):
            self.limiter.check("10.0.0.1")

        self.assertTrue(self.limiter.check("10.0.0.2").allowed)
        self.assertFalse(self.limiter.check("10.0.0.1").allowed)

    def test_invalid_configuration(self):
        with self.assertRaises(ValueError):
            FixedWindowRateLimiter(MemoryCounterStore(), limit=0, window_seconds=60)


class TestSqlCounterStore(unittest.TestCase):
    """Counters shared through the database"""

    def setUp(self):
        Base.metadata.create_all(bind=engine)
        self.store = SqlCounterStore(SessionLocal)

    def tearDown(self):
        db = SessionLocal()
        db.query(RateLimitWindow).delete()
        db.commit()
        db.close()

    def test_counts_hits_in_the_same_window(self):
        self.assertEqual(self.store.hit("client", 960, 60), 1)
        self.assertEqual(self.store.hit("client", 960, 60), 2)
        self.assertEqual(self.store.hit("other", 960, 60), 1)

    def test_old_windows_are_removed(self):
        self.store.hit("client", 960, 60)
        self.store.hit("client", 1020, 60)

        db = SessionLocal()
        windows = [w.window_start for w in db.query(RateLimitWindow).all()]
        db.close()
        self.assertEqual(windows, [1020])

    def test_two_limiters_share_the_same_store(self):
        clock = FakeClock(1000)
        first = FixedWindowRateLimiter(self.store, limit=2, window_seconds=60, clock=clock)
        second = FixedWindowRateLimiter(SqlCounterStore(SessionLocal), limit=2, window_seconds=60, clock=clock)

        first.check("client")
        second.check("client")

        self.assertFalse(first.check("client").allowed)


if __name__ == '__main__':
    unittest.main()
