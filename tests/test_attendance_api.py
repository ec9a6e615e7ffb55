"""
API tests for classes, attendance recording and commission reports
"""

from tests.api_base import ApiTestCase


class TestClassesApi(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.ana = self.create_teacher("Ana")

    def test_create_class_with_policy(self):
        created = self.create_class(self.ana["id"], "BY_CLASS", 100000)

        self.assertEqual(created["commission_type"], "BY_CLASS")
        self.assertEqual(created["commission_amount"], 100000)
        self.assertEqual(created["commission_type_label"], "Commission per Class")
        self.assertEqual(created["completed_meetings"], 0)

    def test_unknown_commission_type_is_rejected(self):
        body = self.post("/api/v1/classes", {
            "name": "Math A", "teacher_id": self.ana["id"], "commission_type": "BY_HOUR", "commission_amount": 1000,
        }, expected=400)

        self.assertEqual(body["field"], "commission_type")

    def test_negative_commission_is_rejected(self):
        body = self.post("/api/v1/classes", {
            "name": "Math A", "teacher_id": self.ana["id"], "commission_type": "BY_CLASS", "commission_amount": -5,
        }, expected=400)

        self.assertEqual(body["field"], "commission_amount")

    def test_update_policy_is_validated(self):
        course_class = self.create_class(self.ana["id"])

        response = self.client.put(
            f"/api/v1/classes/{course_class['id']}", json={"commission_type": "WEEKLY"}, headers=self.headers
        )
        self.assertEqual(response.status_code, 400)

        response = self.client.put(
            f"/api/v1/classes/{course_class['id']}", json={"commission_amount": 20000}, headers=self.headers
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["commission_amount"], 20000)
        self.assertEqual(response.json()["commission_type"], "BY_STUDENT")

    def test_unknown_teacher(self):
        self.post("/api/v1/classes", {"name": "Math A", "teacher_id": 999}, expected=404)

    def test_enrolment(self):
        course_class = self.create_class(self.ana["id"])
        student = self.create_student("Sari")

        self.enroll(course_class["id"], student["id"])
        self.post(f"/api/v1/classes/{course_class['id']}/students", {"student_id": student["id"]}, expected=409)

        self.assertEqual(self.get(f"/api/v1/classes/{course_class['id']}")["total_students"], 1)

    def test_requires_staff_login(self):
        response = self.client.get("/api/v1/classes")
        self.assertEqual(response.status_code, 401)


class TestAttendanceApi(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.ana = self.create_teacher("Ana")
        self.budi = self.create_teacher("Budi")
        self.course_class = self.create_class(self.ana["id"], "BY_STUDENT", 15000)
        self.students = [self.create_student(name) for name in ("Sari", "Tono", "Wati")]
        for student in self.students:
            self.enroll(self.course_class["id"], student["id"])

    def ids(self):
        return [s["id"] for s in self.students]

    def test_records_meeting_and_commission(self):
        s1, s2, s3 = self.ids()

        result = self.record_attendance(self.course_class["id"], [(s1, "HADIR"), (s2, "TERLAMBAT"), (s3, "IZIN")])

        self.assertTrue(result["success"])
        self.assertEqual(result["meeting_number"], 1)
        self.assertEqual(result["present_count"], 3)
        self.assertEqual(result["commission_calculation"]["amount"], 30000)
        self.assertEqual(result["commission_calculation"]["eligible_student_count"], 2)
        self.assertEqual(result["commission_calculation"]["breakdown"], "2 students × Rp 15.000 = Rp 30.000")
        self.assertEqual(result["commission_calculation"]["type"], "BY_STUDENT")

        course_class = self.get(f"/api/v1/classes/{self.course_class['id']}")
        self.assertEqual(course_class["completed_meetings"], 1)
        self.assertIsNotNone(course_class["start_date"])

        meetings = self.get(f"/api/v1/classes/{self.course_class['id']}/meetings")
        self.assertEqual(len(meetings), 1)
        self.assertEqual(meetings[0]["status"], "COMPLETED")
        self.assertEqual(meetings[0]["calculated_commission"], 30000)
        self.assertEqual(meetings[0]["actual_teacher_id"], self.ana["id"])
        self.assertIsNone(meetings[0]["substitute_teacher_id"])

    def test_meetings_are_numbered_in_order(self):
        s1 = self.ids()[0]

        first = self.record_attendance(self.course_class["id"], [(s1, "HADIR")])
        second = self.record_attendance(self.course_class["id"], [(s1, "HADIR")])

        self.assertEqual((first["meeting_number"], second["meeting_number"]), (1, 2))

    def test_absent_main_teacher_needs_substitute(self):
        s1 = self.ids()[0]

        self.record_attendance(
            self.course_class["id"], [(s1, "HADIR")], expected=400, is_main_teacher_absent=True
        )

    def test_substitute_is_credited(self):
        s1 = self.ids()[0]

        self.record_attendance(
            self.course_class["id"], [(s1, "HADIR")],
            is_main_teacher_absent=True, substitute_teacher_id=self.budi["id"],
        )

        meeting = self.get(f"/api/v1/classes/{self.course_class['id']}/meetings")[0]
        self.assertEqual(meeting["substitute_teacher_id"], self.budi["id"])
        self.assertEqual(meeting["actual_teacher_id"], self.budi["id"])

    def test_someone_must_attend(self):
        s1, s2, _ = self.ids()

        self.record_attendance(self.course_class["id"], [(s1, "TIDAK_HADIR"), (s2, "TIDAK_HADIR")], expected=400)
        self.record_attendance(self.course_class["id"], [], expected=400)

    def test_excused_only_meeting_earns_nothing(self):
        s1 = self.ids()[0]

        result = self.record_attendance(self.course_class["id"], [(s1, "IZIN")])

        self.assertEqual(result["commission_calculation"]["amount"], 0)
        self.assertEqual(result["commission_calculation"]["breakdown"], "no students present or late")

    def test_unknown_status_names_the_field(self):
        s1 = self.ids()[0]

        body = self.record_attendance(self.course_class["id"], [(s1, "HADIR"), (s1, "SICK")], expected=400)

        self.assertEqual(body["field"], "attendance_records[1].status")

    def test_student_listed_twice_is_rejected(self):
        s1, s2, _ = self.ids()

        body = self.record_attendance(
            self.course_class["id"], [(s1, "HADIR"), (s2, "HADIR"), (s1, "TERLAMBAT")], expected=400
        )

        self.assertEqual(body["field"], "attendance_records[2].student_id")
        self.assertEqual(self.get(f"/api/v1/classes/{self.course_class['id']}/meetings"), [])

    def test_students_outside_the_class_are_skipped(self):
        s1 = self.ids()[0]
        outsider = self.create_student("Outsider")

        result = self.record_attendance(self.course_class["id"], [(s1, "HADIR"), (outsider["id"], "HADIR")])

        self.assertEqual(result["present_count"], 1)
        self.assertEqual(result["commission_calculation"]["amount"], 15000)
        self.assertEqual(self.get(f"/api/v1/attendance/students/{outsider['id']}"), [])

    def test_unknown_class(self):
        self.record_attendance(999, [(self.ids()[0], "HADIR")], expected=404)

    def test_student_attendance_history(self):
        s1 = self.ids()[0]
        self.record_attendance(self.course_class["id"], [(s1, "HADIR")])
        self.record_attendance(self.course_class["id"], [(s1, "TERLAMBAT")])

        history = self.get(f"/api/v1/attendance/students/{s1}")

        self.assertEqual(len(history), 2)
        self.assertEqual({h["status"] for h in history}, {"HADIR", "TERLAMBAT"})
        self.assertEqual(history[0]["class_name"], "Math A")


class TestCommissionReportApi(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.ana = self.create_teacher("Ana")
        self.budi = self.create_teacher("Budi")
        self.course_class = self.create_class(self.ana["id"], "BY_STUDENT", 15000)
        self.students = [self.create_student(name)["id"] for name in ("Sari", "Tono")]
        for student_id in self.students:
            self.enroll(self.course_class["id"], student_id)

        s1, s2 = self.students
        self.record_attendance(self.course_class["id"], [(s1, "HADIR"), (s2, "TERLAMBAT")])
        self.record_attendance(
            self.course_class["id"], [(s1, "HADIR"), (s2, "TIDAK_HADIR")],
            is_main_teacher_absent=True, substitute_teacher_id=self.budi["id"],
        )

    def test_report_credits_each_teacher(self):
        report = self.get("/api/v1/teacher-commissions")

        by_name = {t["teacher"]["name"]: t for t in report["teachers"]}
        self.assertEqual(by_name["Ana"]["total_commission"], 30000)
        self.assertEqual(by_name["Ana"]["total_meetings"], 1)
        self.assertEqual(by_name["Budi"]["total_commission"], 15000)
        self.assertEqual(by_name["Budi"]["substitute_meetings"], 1)
        self.assertEqual(report["summary"]["total_commissions"], 45000)
        self.assertEqual(report["summary"]["total_meetings"], 2)

    def test_filter_by_teacher(self):
        report = self.get("/api/v1/teacher-commissions", params={"teacher_id": self.budi["id"]})

        self.assertEqual([t["teacher"]["name"] for t in report["teachers"]], ["Budi"])
        meeting = report["teachers"][0]["meetings"][0]
        self.assertTrue(meeting["is_substitute"])
        self.assertEqual(meeting["class"]["name"], "Math A")

    def test_period_outside_meetings_is_empty(self):
        report = self.get("/api/v1/teacher-commissions", params={"month": 1, "year": 2000})

        self.assertEqual(report["teachers"], [])
        self.assertEqual(report["summary"]["total_commissions"], 0)
        self.assertEqual(report["period"]["start_date"], "2000-01-01")
        self.assertEqual(report["period"]["end_date"], "2000-01-31")

    def test_bad_dates(self):
        self.get("/api/v1/teacher-commissions", params={"start_date": "01/02/2025", "end_date": "2025-02-10"},
                 expected=400)
        body = self.get("/api/v1/teacher-commissions", params={"start_date": "2025-02-10", "end_date": "2025-02-01"},
                        expected=400)
        self.assertEqual(body["field"], "end_date")

    def test_class_totals(self):
        totals = self.get(f"/api/v1/classes/{self.course_class['id']}/commissions")

        self.assertEqual(totals["total_commission"], 45000)
        self.assertEqual(totals["total_meetings"], 2)
        self.assertEqual(totals["total_students"], 3)
        self.assertEqual(
            {t["teacher_name"]: t["total_commission"] for t in totals["teachers"]},
            {"Ana": 30000, "Budi": 15000},
        )
        self.assertEqual(totals["recorded_commission"], 45000)

    def test_recorded_total_keeps_amounts_at_recording_time(self):
        response = self.client.put(
            f"/api/v1/classes/{self.course_class['id']}", json={"commission_amount": 20000}, headers=self.headers
        )
        self.assertEqual(response.status_code, 200)

        totals = self.get(f"/api/v1/classes/{self.course_class['id']}/commissions")

        self.assertEqual(totals["total_commission"], 60000)
        self.assertEqual(totals["recorded_commission"], 45000)

    def test_teacher_sees_own_commissions(self):
        self.post("/api/v1/users", {
            "username": "budi", "email": "budi@example.com", "password": "secret123",
            "role": "teacher", "teacher_id": self.budi["id"],
        })
        teacher_headers = self.login("budi", "secret123")

        report = self.get("/api/v1/teacher-commissions/me", headers=teacher_headers)

        self.assertEqual(len(report["teachers"]), 1)
        self.assertEqual(report["teachers"][0]["total_commission"], 15000)
        self.get("/api/v1/teacher-commissions", headers=teacher_headers, expected=403)

    def test_staff_is_not_a_teacher(self):
        self.get("/api/v1/teacher-commissions/me", expected=403)
