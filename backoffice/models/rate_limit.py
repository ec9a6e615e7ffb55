# -*- coding: utf-8 -*-
"""
SQLAlchemy model for the fixed-window request counters of the rate limiter.
"""
from sqlalchemy import Column, Integer, String, UniqueConstraint
from backoffice.database import Base


class RateLimitWindow(Base):
    __tablename__ = "rate_limit_windows"
    __table_args__ = (UniqueConstraint("client_key", "window_start", name="uq_rate_limit_window"),)

    id = Column(Integer, primary_key=True)
    client_key = Column(String(255), nullable=False, index=True)
    window_start = Column(Integer, nullable=False)  # epoch seconds
    count = Column(Integer, nullable=False, default=0)
