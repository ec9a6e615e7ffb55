"""
Unit tests for the payment reminder cycle
"""

import unittest
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

from backoffice.enums import ResetType
from backoffice.errors import InvalidInput
from backoffice.services.reminder import (
    REMINDER_CYCLE_MEETINGS, evaluate_reminder, latest_payment_reset,
)

NOW = datetime(2025, 3, 31, 12, 0)

# Weekly meetings in March 2025
MEETINGS = [
    datetime(2025, 3, 1, 10, 0),
    datetime(2025, 3, 8, 10, 0),
    datetime(2025, 3, 15, 10, 0),
    datetime(2025, 3, 22, 10, 0),
    datetime(2025, 3, 29, 10, 0),
]


def pending_payment(remaining=500000, status="pending", dismissed_at=None):
    return {"status": status, "remaining_amount": remaining, "reminder_dismissed_at": dismissed_at}


def tx(paid_at):
    return SimpleNamespace(payment_date=paid_at, amount=100000)


class TestReminderDecisions(unittest.TestCase):
    """Reminder decisions for a single student"""

    def test_first_meeting_without_payment_shows_reminder(self):
        decision = evaluate_reminder(pending_payment(), [], MEETINGS[:1], NOW, student_id=7)

        self.assertTrue(decision.should_show_reminder)
        self.assertIn("active since first meeting", decision.reason)
        self.assertEqual(decision.reason, "Meeting 1 - reminder active since first meeting, remaining: Rp 500.000")
        self.assertEqual(decision.student_id, 7)
        self.assertEqual(decision.total_meetings, 1)
        self.assertIsNone(decision.reset_type)

    def test_payment_before_first_meeting_is_not_a_reset(self):
        old_payment = tx(datetime(2025, 2, 28, 9, 0))

        decision = evaluate_reminder(pending_payment(), [old_payment], MEETINGS[:4], NOW)

        self.assertTrue(decision.should_show_reminder)
        self.assertIsNone(decision.last_reset_date)
        self.assertEqual(decision.meetings_since_reset, 4)

    def test_reminder_stays_on_every_meeting_without_reset(self):
        for count in range(1, len(MEETINGS) + 1):
            with self.subTest(meetings=count):
                decision = evaluate_reminder(pending_payment(), [], MEETINGS[:count], NOW)
                self.assertTrue(decision.should_show_reminder)

    def test_dismissal_after_second_meeting_waits_one_more_meeting(self):
        payment = pending_payment(dismissed_at=datetime(2025, 3, 10, 8, 0))

        decision = evaluate_reminder(payment, [], MEETINGS[:4], NOW)

        self.assertFalse(decision.should_show_reminder)
        self.assertEqual(decision.meetings_since_reset, 2)
        self.assertEqual(decision.reset_type, ResetType.DISMISS)
        self.assertEqual(
            decision.reason,
            "2 meetings since last dismiss (2025-03-10), 1 more meeting until next reminder",
        )

    def test_third_meeting_after_dismissal_triggers_reminder(self):
        payment = pending_payment(dismissed_at=datetime(2025, 3, 10, 8, 0))

        decision = evaluate_reminder(payment, [], MEETINGS, NOW)

        self.assertTrue(decision.should_show_reminder)
        self.assertEqual(decision.meetings_since_reset, REMINDER_CYCLE_MEETINGS)
        self.assertEqual(
            decision.reason,
            "3 meetings since last dismiss (2025-03-10), reminder triggered, remaining: Rp 500.000",
        )

    def test_cycle_after_dismissal(self):
        dismissed_at = datetime(2025, 3, 2, 8, 0)
        expected = [False, False, True, True]

        for since, shown in enumerate(expected, start=1):
            with self.subTest(meetings_since_reset=since):
                decision = evaluate_reminder(
                    pending_payment(dismissed_at=dismissed_at), [], MEETINGS[:since + 1], NOW
                )
                self.assertEqual(decision.meetings_since_reset, since)
                self.assertEqual(decision.should_show_reminder, shown)

    def test_one_meeting_after_reset_reason(self):
        decision = evaluate_reminder(
            pending_payment(dismissed_at=datetime(2025, 3, 20)), [], MEETINGS[:4], NOW
        )

        self.assertEqual(
            decision.reason,
            "1 meeting since last dismiss (2025-03-20), 2 more meetings until next reminder",
        )

    def test_zero_meetings_since_reset(self):
        decision = evaluate_reminder(
            pending_payment(dismissed_at=datetime(2025, 3, 25)), [], MEETINGS[:4], NOW
        )

        self.assertFalse(decision.should_show_reminder)
        self.assertEqual(decision.meetings_since_reset, 0)
        self.assertEqual(decision.reason, "0 meetings since last dismiss (2025-03-25), next reminder at 3 meetings")

    def test_payment_after_first_meeting_resets_cycle(self):
        decision = evaluate_reminder(pending_payment(), [tx(datetime(2025, 3, 9, 14, 0))], MEETINGS[:4], NOW)

        self.assertFalse(decision.should_show_reminder)
        self.assertEqual(decision.reset_type, ResetType.PAYMENT)
        self.assertEqual(decision.last_reset_date, datetime(2025, 3, 9, 14, 0))
        self.assertEqual(decision.meetings_since_reset, 2)

    def test_payment_on_first_meeting_day_is_not_after_it(self):
        # Same calendar day, and more than seven days ago
        same_day = tx(datetime(2025, 3, 1, 15, 0))

        decision = evaluate_reminder(pending_payment(), [same_day], MEETINGS[:2], NOW)

        self.assertTrue(decision.should_show_reminder)
        self.assertIsNone(decision.reset_type)

    def test_recent_payment_counts_even_before_first_meeting(self):
        meetings = [datetime(2025, 3, 30, 10, 0)]
        payment_tx = tx(datetime(2025, 3, 27, 9, 0))

        decision = evaluate_reminder(pending_payment(), [payment_tx], meetings, NOW)

        self.assertFalse(decision.should_show_reminder)
        self.assertEqual(decision.reset_type, ResetType.PAYMENT)
        self.assertEqual(decision.meetings_since_reset, 1)

    def test_same_data_changes_decision_when_payment_ages(self):
        meetings = [datetime(2025, 3, 30, 10, 0)]
        payment_tx = tx(datetime(2025, 3, 27, 9, 0))

        later = evaluate_reminder(pending_payment(), [payment_tx], meetings, datetime(2025, 4, 10))

        self.assertTrue(later.should_show_reminder)
        self.assertIsNone(later.reset_type)

    def test_latest_of_payment_and_dismissal_wins(self):
        payment_first = evaluate_reminder(
            pending_payment(dismissed_at=datetime(2025, 3, 12)),
            [tx(datetime(2025, 3, 9))], MEETINGS, NOW,
        )
        dismissal_first = evaluate_reminder(
            pending_payment(dismissed_at=datetime(2025, 3, 9)),
            [tx(datetime(2025, 3, 12))], MEETINGS, NOW,
        )

        self.assertEqual(payment_first.reset_type, ResetType.DISMISS)
        self.assertEqual(payment_first.last_reset_date, datetime(2025, 3, 12))
        self.assertEqual(dismissal_first.reset_type, ResetType.PAYMENT)
        self.assertEqual(dismissal_first.last_reset_date, datetime(2025, 3, 12))

    def test_payment_wins_a_tie_with_dismissal(self):
        moment = datetime(2025, 3, 9, 14, 0)

        decision = evaluate_reminder(pending_payment(dismissed_at=moment), [tx(moment)], MEETINGS, NOW)

        self.assertEqual(decision.reset_type, ResetType.PAYMENT)
        self.assertEqual(decision.last_reset_date, moment)

    def test_aware_datetimes_are_compared_in_utc(self):
        aware_now = NOW.replace(tzinfo=timezone.utc)
        # 2025-03-10 03:00 in UTC
        dismissed_at = datetime(2025, 3, 10, 10, 0, tzinfo=timezone(timedelta(hours=7)))

        decision = evaluate_reminder(pending_payment(dismissed_at=dismissed_at), [], MEETINGS[:4], aware_now)

        self.assertEqual(decision.last_reset_date, datetime(2025, 3, 10, 3, 0))
        self.assertEqual(decision.meetings_since_reset, 2)

    def test_dates_are_accepted_for_meetings(self):
        decision = evaluate_reminder(pending_payment(), [], [date(2025, 3, 1)], NOW)

        self.assertTrue(decision.should_show_reminder)
        self.assertEqual(decision.total_meetings, 1)

    def test_meeting_order_does_not_matter(self):
        payment = pending_payment(dismissed_at=datetime(2025, 3, 10))

        in_order = evaluate_reminder(payment, [], MEETINGS, NOW)
        shuffled = evaluate_reminder(payment, [], list(reversed(MEETINGS)), NOW)

        self.assertEqual(in_order, shuffled)


class TestReminderShortCircuits(unittest.TestCase):
    """Cases that never show a reminder"""

    def test_no_payment(self):
        decision = evaluate_reminder(None, [], MEETINGS, NOW, student_id=3)

        self.assertFalse(decision.should_show_reminder)
        self.assertEqual(decision.reason, "No payment found")
        self.assertEqual(decision.student_id, 3)

    def test_completed_payment(self):
        decision = evaluate_reminder(pending_payment(remaining=0, status="completed"), [], MEETINGS, NOW)

        self.assertFalse(decision.should_show_reminder)
        self.assertEqual(decision.reason, "Payment completed (paid in full)")

    def test_completed_status_wins_over_remaining_amount(self):
        decision = evaluate_reminder(pending_payment(remaining=500000, status="completed"), [], MEETINGS, NOW)

        self.assertFalse(decision.should_show_reminder)
        self.assertEqual(decision.reason, "Payment completed (paid in full)")
        self.assertEqual(decision.remaining_amount, 500000)

    def test_nothing_left_to_pay(self):
        decision = evaluate_reminder(pending_payment(remaining=0, status="partial"), [], MEETINGS, NOW)

        self.assertFalse(decision.should_show_reminder)
        self.assertEqual(decision.reason, "Payment completed (no remaining amount)")
        self.assertEqual(decision.total_meetings, len(MEETINGS))

    def test_no_meetings_yet(self):
        decision = evaluate_reminder(pending_payment(), [], [], NOW)

        self.assertFalse(decision.should_show_reminder)
        self.assertEqual(decision.reason, "No meetings yet, next reminder at meeting 1")

    def test_orm_like_payment_object(self):
        payment = SimpleNamespace(status="partial", remaining_amount=250000, reminder_dismissed_at=None)

        decision = evaluate_reminder(payment, [], MEETINGS[:2], NOW)

        self.assertTrue(decision.should_show_reminder)
        self.assertEqual(decision.remaining_amount, 250000)

    def test_to_dict_serializes_reset(self):
        moment = datetime(2025, 3, 9, 14, 0)
        data = evaluate_reminder(pending_payment(), [tx(moment)], MEETINGS[:4], NOW, student_id=1).to_dict()

        self.assertEqual(data["reset_type"], "payment")
        self.assertEqual(data["last_reset_date"], "2025-03-09T14:00:00")
        self.assertEqual(data["student_id"], 1)
        self.assertFalse(data["should_show_reminder"])


class TestReminderValidation(unittest.TestCase):

    def test_now_must_be_a_datetime(self):
        with self.assertRaises(InvalidInput) as ctx:
            evaluate_reminder(pending_payment(), [], MEETINGS, date(2025, 3, 31))
        self.assertEqual(ctx.exception.field, "now")

    def test_attendance_dates_must_be_a_list(self):
        with self.assertRaises(InvalidInput):
            evaluate_reminder(pending_payment(), [], None, NOW)

    def test_attendance_dates_must_be_dates(self):
        with self.assertRaises(InvalidInput) as ctx:
            evaluate_reminder(pending_payment(), [], [MEETINGS[0], "2025-03-08"], NOW)
        self.assertEqual(ctx.exception.field, "attendance_dates[1]")

    def test_unknown_payment_status(self):
        with self.assertRaises(InvalidInput):
            evaluate_reminder(pending_payment(status="overdue"), [], MEETINGS, NOW)

    def test_non_numeric_remaining_amount(self):
        with self.assertRaises(InvalidInput):
            evaluate_reminder(pending_payment(remaining="500000"), [], MEETINGS, NOW)

    def test_nan_and_infinite_remaining_amount(self):
        for remaining in (float("nan"), float("inf")):
            with self.subTest(remaining=remaining):
                with self.assertRaises(InvalidInput) as ctx:
                    evaluate_reminder(pending_payment(remaining=remaining), [], MEETINGS, NOW)
                self.assertEqual(ctx.exception.field, "payment.remaining_amount")

    def test_transaction_without_date(self):
        with self.assertRaises(InvalidInput) as ctx:
            evaluate_reminder(pending_payment(), [{"amount": 1000}], MEETINGS, NOW)
        self.assertEqual(ctx.exception.field, "transactions[0].payment_date")


class TestLatestPaymentReset(unittest.TestCase):

    def test_picks_latest_relevant_payment(self):
        dates = [datetime(2025, 2, 1), datetime(2025, 3, 5), datetime(2025, 3, 20)]

        self.assertEqual(latest_payment_reset(dates, MEETINGS[0], NOW), datetime(2025, 3, 20))

    def test_no_meetings_only_recent_payments_count(self):
        dates = [datetime(2025, 3, 1), datetime(2025, 3, 28)]

        self.assertEqual(latest_payment_reset(dates, None, NOW), datetime(2025, 3, 28))
        self.assertIsNone(latest_payment_reset(dates[:1], None, NOW))


if __name__ == '__main__':
    unittest.main()
