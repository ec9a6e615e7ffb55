"""
Creates the first administrator account when it does not exist yet.

The credentials come from FIRST_ADMIN_USERNAME, FIRST_ADMIN_EMAIL and
FIRST_ADMIN_PASSWORD.
"""
import logging

from backoffice.auth import get_password_hash
from backoffice.config import Config
from backoffice.database import SessionLocal
from backoffice.enums import UserRole
from backoffice.models.user import User


def create_first_user():
    db = SessionLocal()

    try:
        user = db.query(User).filter(User.username == Config.FIRST_ADMIN_USERNAME).first()

        if not user:
            db_user = User(
                username=Config.FIRST_ADMIN_USERNAME,
                email=Config.FIRST_ADMIN_EMAIL,
                name="System Administrator",
                hashed_password=get_password_hash(Config.FIRST_ADMIN_PASSWORD),
                role=UserRole.ADMIN.value
            )
            db.add(db_user)
            db.commit()
            logging.info(f"Administrator '{Config.FIRST_ADMIN_USERNAME}' created")
        else:
            logging.info(f"Administrator '{Config.FIRST_ADMIN_USERNAME}' already exists")

    except Exception as e:
        logging.error(f"Error creating the administrator: {e}")
        db.rollback()
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=Config.LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    from backoffice.database import engine, Base
    from backoffice.models import user, student, teacher, course_class, meeting, attendance, payment, rate_limit  # noqa: F401
    Base.metadata.create_all(bind=engine)
    create_first_user()
