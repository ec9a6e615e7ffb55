# -*- coding: utf-8 -*-
"""
Main FastAPI application of the course back office: classes, attendance,
teacher commissions and student payment reminders.
"""
import logging

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backoffice.config import Config

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    filename=Config.LOG_FILE
)

import create_first_user
from backoffice.auth import get_current_active_user, get_staff_user
from backoffice.database import engine, Base
from backoffice.errors import CalculationError
from backoffice.ratelimit import rate_limit

# Every model must be imported before create_all
from backoffice.models import user, student, teacher, course_class, meeting, attendance, payment, rate_limit as rate_limit_model

from backoffice.routes import (auth_fastapi, users_fastapi, students_fastapi, teachers_fastapi, classes_fastapi,
                               attendance_fastapi, teacher_commissions_fastapi, payments_fastapi)

try:
    Base.metadata.create_all(bind=engine)
    logging.info("Database tables created")
except Exception as e:
    logging.error(f"Error creating database tables: {e}")
    raise

docs_enabled = not Config.is_production()

app = FastAPI(
    title="Course Back Office API",
    description="Class attendance, teacher commissions and payment reminders",
    version="1.0.0",
    docs_url="/docs" if docs_enabled else None,
    redoc_url="/redoc" if docs_enabled else None,
    openapi_url="/openapi.json" if docs_enabled else None
)

origins = [
    Config.FRONTEND_URL,
    "http://localhost",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CalculationError)
async def calculation_error_handler(request: Request, exc: CalculationError):
    logging.warning(f"{request.method} {request.url.path} rejected: {exc.message} (field: {exc.field})")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=exc.to_dict())


limited = [Depends(rate_limit)]
staff_only = [Depends(rate_limit), Depends(get_staff_user)]

# Router mounting
app.include_router(auth_fastapi.router, dependencies=limited)
app.include_router(users_fastapi.router, dependencies=limited)
app.include_router(students_fastapi.router, prefix="/api/v1/students", dependencies=staff_only)
app.include_router(teachers_fastapi.router, prefix="/api/v1/teachers", dependencies=staff_only)
app.include_router(classes_fastapi.router, prefix="/api/v1/classes", dependencies=staff_only)
app.include_router(attendance_fastapi.router, prefix="/api/v1/attendance",
                   dependencies=[Depends(rate_limit), Depends(get_current_active_user)])
app.include_router(teacher_commissions_fastapi.router, prefix="/api/v1/teacher-commissions", dependencies=limited)
app.include_router(payments_fastapi.router, prefix="/api/v1/payments", dependencies=staff_only)

create_first_user.create_first_user()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Course Back Office API",
        "documentation": "/docs" if docs_enabled else None,
        "endpoints": [
            {"auth": "/api/v1/auth/token"},
            {"students": "/api/v1/students"},
            {"teachers": "/api/v1/teachers"},
            {"classes": "/api/v1/classes"},
            {"attendance": "/api/v1/attendance/class"},
            {"teacher_commissions": "/api/v1/teacher-commissions"},
            {"payments": "/api/v1/payments"},
            {"reminders": "/api/v1/payments/reminders"},
        ]
    }
