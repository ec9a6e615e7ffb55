# -*- coding: utf-8 -*-
"""
Fixed-window rate limiting for the API.

Counters live in a ``CounterStore``. ``SqlCounterStore`` keeps them in the
application database so every instance of the API shares the same windows;
``MemoryCounterStore`` is for a single process (and tests). The limiter is
handed to the routes through the ``get_rate_limiter`` dependency, which can be
overridden.
"""
import logging
import threading
import time
from collections import namedtuple
from functools import lru_cache

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError

from backoffice.config import Config
from backoffice.database import SessionLocal
from backoffice.models.rate_limit import RateLimitWindow

RateLimitResult = namedtuple("RateLimitResult", ["allowed", "count", "limit", "retry_after"])


class CounterStore:
    def hit(self, key, window_start, window_seconds):
        """Increments the counter of ``key`` for the window and returns the new count."""
        raise NotImplementedError


class MemoryCounterStore(CounterStore):
    def __init__(self):
        self._counts = {}
        self._lock = threading.Lock()

    def hit(self, key, window_start, window_seconds):
        with self._lock:
            # Older windows can never be hit again
            for stale in [k for k in self._counts if k[1] < window_start]:
                del self._counts[stale]
            count = self._counts.get((key, window_start), 0) + 1
            self._counts[(key, window_start)] = count
            return count


class SqlCounterStore(CounterStore):
    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def _increment(self, db, key, window_start):
        return db.query(RateLimitWindow).filter(
            RateLimitWindow.client_key == key,
            RateLimitWindow.window_start == window_start,
        ).update({RateLimitWindow.count: RateLimitWindow.count + 1}, synchronize_session=False)

    def hit(self, key, window_start, window_seconds):
        db = self.session_factory()
        try:
            if not self._increment(db, key, window_start):
                db.query(RateLimitWindow).filter(
                    RateLimitWindow.window_start < window_start
                ).delete(synchronize_session=False)
                db.add(RateLimitWindow(client_key=key, window_start=window_start, count=1))
                try:
                    db.commit()
                except IntegrityError:
                    # Another instance opened the same window first
                    db.rollback()
                    self._increment(db, key, window_start)
                    db.commit()
            else:
                db.commit()
            return db.query(RateLimitWindow.count).filter(
                RateLimitWindow.client_key == key,
                RateLimitWindow.window_start == window_start,
            ).scalar()
        finally:
            db.close()


class FixedWindowRateLimiter:
    def __init__(self, store, limit, window_seconds, clock=time.time):
        if limit < 1 or window_seconds < 1:
            raise ValueError("limit and window_seconds must be positive")
        self.store = store
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock

    def check(self, key):
        now = int(self.clock())
        window_start = now - now % self.window_seconds
        count = self.store.hit(key, window_start, self.window_seconds)
        retry_after = window_start + self.window_seconds - now
        return RateLimitResult(count <= self.limit, count, self.limit, retry_after)


@lru_cache(maxsize=1)
def get_rate_limiter():
    return FixedWindowRateLimiter(
        SqlCounterStore(),
        limit=Config.RATE_LIMIT_REQUESTS,
        window_seconds=Config.RATE_LIMIT_WINDOW_SECONDS,
    )


def client_identity(request: Request):
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def rate_limit(request: Request, limiter: FixedWindowRateLimiter = Depends(get_rate_limiter)):
    key = client_identity(request)
    result = limiter.check(key)
    if not result.allowed:
        logging.warning(f"Rate limit exceeded for {key}: {result.count}/{result.limit}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests",
            headers={"Retry-After": str(result.retry_after)},
        )
