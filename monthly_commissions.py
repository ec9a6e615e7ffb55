import logging
import argparse
from datetime import date

from backoffice.config import Config
from backoffice.database import SessionLocal
from backoffice.errors import CalculationError
# --- Every model, so the relationships resolve ---
from backoffice.models import user, student, teacher, course_class, meeting, attendance, payment  # noqa: F401
from backoffice.routes.teacher_commissions_fastapi import build_report, completed_meetings_query
from backoffice.services.commission_report import commission_period, previous_month
from backoffice.services.formatting import format_currency

logging.basicConfig(level=Config.LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')


def monthly_commissions(argv=None):
    """
    Logs the commission report of every teacher for one month.
    Defaults to the PREVIOUS month; --month and --year select another one.
    """
    parser = argparse.ArgumentParser(description='Monthly teacher commissions')
    parser.add_argument('--month', type=int, help='Reference month (1-12)')
    parser.add_argument('--year', type=int, help='Reference year (e.g. 2025)')
    args = parser.parse_args(argv)

    if args.month and args.year:
        month, year = args.month, args.year
        logging.info(f"MANUAL MODE: commissions for {month:02d}/{year}")
    else:
        month, year = previous_month(date.today())
        logging.info(f"AUTOMATIC MODE: commissions for the previous month ({month:02d}/{year})")

    try:
        start, end, period = commission_period(month=month, year=year)
    except CalculationError as e:
        logging.error(f"Invalid period: {e.message}")
        return None

    db = SessionLocal()
    try:
        report = build_report(completed_meetings_query(db, start, end).all(), period)
    finally:
        db.close()

    for data in report["teachers"]:
        logging.info(
            f"{data['teacher']['name']}: {format_currency(data['total_commission'])} "
            f"({data['total_meetings']} meetings, {data['total_students']} students, "
            f"{data['substitute_meetings']} as substitute)"
        )

    summary = report["summary"]
    logging.info("--- Summary ---")
    logging.info(f"Teachers: {summary['total_teachers']}")
    logging.info(f"Meetings: {summary['total_meetings']}")
    logging.info(f"Total commissions: {format_currency(summary['total_commissions'])}")
    return report


if __name__ == "__main__":
    monthly_commissions()
