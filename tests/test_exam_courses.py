# tests/test_exam_courses.py
from ielts_portal.models.exam_course import ExamCourse, ExamCourseExamSet
from ielts_portal.models.exam_set import ExamSet
from ielts_portal.models.feedback import Feedback, FeedbackReply
from ielts_portal.models.submission import Submission


def _extra_reading_set(db, title="Second Reading"):
    exam_set = ExamSet(exam_type="reading", exam_set_code="RS_2", exam_set_title=title, total_questions=5)
    db.add(exam_set)
    db.commit()
    db.refresh(exam_set)
    return exam_set


class TestExamCourseCrud:
    def test_create_assigns_sets(self, client, mentor_headers, reading_set, listening_set):
        resp = client.post(
            "/api/ExamCourse/",
            json={
                "courseTitle": "Reading Bootcamp",
                "description": "Four weeks",
                "examType": "Reading",
                # listening set is the wrong type and is skipped
                "examSetIds": [reading_set.id, listening_set.id, reading_set.id],
            },
            headers=mentor_headers,
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["examCourseId"] > 0
        assert body["examType"] == "reading"
        assert body["courseCode"].startswith("EC_")
        assert body["examSetCount"] == 1

    def test_create_needs_at_least_one_set(self, client, mentor_headers):
        resp = client.post(
            "/api/ExamCourse/",
            json={"courseTitle": "Empty", "examType": "reading", "examSetIds": []},
            headers=mentor_headers,
        )
        assert resp.status_code == 400

    def test_create_requires_mentor(self, client, student_headers, reading_set):
        resp = client.post(
            "/api/ExamCourse/",
            json={"courseTitle": "X", "examType": "reading", "examSetIds": [reading_set.id]},
            headers=student_headers,
        )
        assert resp.status_code == 403

    def test_list_with_counts(self, client, reading_set, listening_set, make_course):
        make_course("reading", [reading_set], title="r")
        make_course("listening", [listening_set], title="l")

        resp = client.get("/api/ExamCourse/")
        assert resp.status_code == 200
        by_title = {c["courseTitle"]: c for c in resp.json()}
        assert by_title["r"]["readingExamSetsCount"] == 1
        assert by_title["r"]["listeningExamSetsCount"] == 0
        assert by_title["r"]["totalExamSets"] == 1
        assert by_title["l"]["listeningExamSetsCount"] == 1

    def test_detail(self, client, reading_set, make_course):
        course = make_course("reading", [reading_set], title="detail")
        resp = client.get(f"/api/ExamCourse/{course.id}")
        assert resp.status_code == 200
        body = resp.json()
        assert [s["examSetId"] for s in body["readingExamSets"]] == [reading_set.id]
        assert body["readingExamSets"][0]["questionCount"] == 3
        assert body["writingExamSets"] == []

    def test_detail_missing(self, client):
        assert client.get("/api/ExamCourse/99").status_code == 404

    def test_update_replaces_assignments(self, client, db_session, mentor_headers, reading_set, make_course):
        course = make_course("reading", [reading_set], title="old")
        second = _extra_reading_set(db_session)

        resp = client.put(
            f"/api/ExamCourse/{course.id}",
            json={"courseTitle": "new", "description": "updated", "examSetIds": [second.id]},
            headers=mentor_headers,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["courseTitle"] == "new"
        assert [s["examSetId"] for s in body["readingExamSets"]] == [second.id]

    def test_available_exam_sets(self, client, reading_set, listening_set):
        resp = client.get("/api/ExamCourse/available-examsets/reading")
        assert resp.status_code == 200
        assert [s["examSetId"] for s in resp.json()] == [reading_set.id]
        assert client.get("/api/ExamCourse/available-examsets/cooking").status_code == 400


class TestExamCourseDelete:
    def test_cascade(self, client, db_session, student, mentor, mentor_headers, reading_set, make_course):
        course = make_course("reading", [reading_set], title="doomed")
        keep = make_course("reading", [reading_set], title="kept")

        subs = [
            Submission(user_id=student.id, exam_course_id=course.id, exam_type="reading", exam_id=reading_set.id, answers="[]", status="Submitted"),
            Submission(user_id=student.id, exam_course_id=course.id, exam_type="reading", exam_id=reading_set.id, answers="[]", status="Graded"),
            Submission(user_id=student.id, exam_course_id=keep.id, exam_type="reading", exam_id=reading_set.id, answers="[]", status="Submitted"),
        ]
        db_session.add_all(subs)
        db_session.commit()
        feedback = Feedback(submission_id=subs[1].id, mentor_id=mentor.id, feedback_text="ok")
        db_session.add(feedback)
        db_session.commit()
        db_session.add(FeedbackReply(feedback_id=feedback.id, user_id=student.id, reply_text="thanks"))
        db_session.commit()
        course_id, keep_id = course.id, keep.id

        resp = client.delete(f"/api/ExamCourse/{course_id}", params={"reason": "cleanup"}, headers=mentor_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["deletedExamCourseId"] == course_id
        assert body["deletedSubmissionsCount"] == 2
        assert body["deletedAssignmentsCount"] == 1
        assert body["deletedAt"]

        db_session.expire_all()
        assert db_session.get(ExamCourse, course_id) is None
        assert db_session.query(Submission).filter(Submission.exam_course_id == course_id).count() == 0
        assert db_session.query(ExamCourseExamSet).filter(ExamCourseExamSet.exam_course_id == course_id).count() == 0
        assert db_session.query(Feedback).count() == 0
        assert db_session.query(FeedbackReply).count() == 0

        # the other course is untouched
        assert db_session.query(Submission).filter(Submission.exam_course_id == keep_id).count() == 1
        assert db_session.query(ExamCourseExamSet).filter(ExamCourseExamSet.exam_course_id == keep_id).count() == 1

    def test_delete_missing(self, client, mentor_headers):
        assert client.delete("/api/ExamCourse/1234", headers=mentor_headers).status_code == 404


class TestExamCatalogue:
    def test_available_exams_grouped(self, client, reading_set, listening_set, writing_set):
        resp = client.get("/api/Exam/available")
        assert resp.status_code == 200
        body = resp.json()
        assert [s["examSetId"] for s in body["reading"]] == [reading_set.id]
        assert body["speaking"] == []
        assert body["summary"] == {
            "totalReading": 1,
            "totalListening": 1,
            "totalSpeaking": 0,
            "totalWriting": 1,
            "totalExams": 3,
        }

    def test_course_exams(self, client, reading_set, make_course):
        course = make_course("reading", [reading_set], title="cat")
        body = client.get(f"/api/Exam/course/{course.id}").json()
        assert body["courseId"] == course.id
        assert body["totalExams"] == 1
        assert body["exams"][0]["examSetTitle"] == "Academic Reading Set 1"
        assert client.get("/api/Exam/course/999").status_code == 404
