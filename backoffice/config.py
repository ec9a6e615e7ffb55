# -*- coding: utf-8 -*-
"""
Application settings read from environment variables (optional .env file).
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")

    DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./backoffice.db")

    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-secret-key-change-in-production"
    ALGORITHM = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 8)))

    FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    LOG_FILE = os.environ.get("LOG_FILE") or None

    # Fixed window: RATE_LIMIT_REQUESTS per client every RATE_LIMIT_WINDOW_SECONDS
    RATE_LIMIT_REQUESTS = int(os.environ.get("RATE_LIMIT_REQUESTS", "100"))
    RATE_LIMIT_WINDOW_SECONDS = int(os.environ.get("RATE_LIMIT_WINDOW_SECONDS", str(15 * 60)))

    # Upper bound for a class commission, checked at the API boundary only
    MAX_COMMISSION_AMOUNT = float(os.environ.get("MAX_COMMISSION_AMOUNT", "10000000"))

    FIRST_ADMIN_USERNAME = os.environ.get("FIRST_ADMIN_USERNAME", "admin")
    FIRST_ADMIN_EMAIL = os.environ.get("FIRST_ADMIN_EMAIL", "admin@example.com")
    FIRST_ADMIN_PASSWORD = os.environ.get("FIRST_ADMIN_PASSWORD", "admin")

    @classmethod
    def is_production(cls):
        return cls.ENVIRONMENT == "production"
