# tests/test_grading.py
from datetime import datetime, timedelta, timezone

import pytest

from ielts_portal.models.feedback import Feedback, FeedbackReply
from ielts_portal.models.submission import Submission


@pytest.fixture
def writing_submission(db_session, student):
    sub = Submission(
        user_id=student.id,
        exam_type="writing",
        exam_id=1,
        answers="essay",
        status="AI Scoring Failed",
    )
    db_session.add(sub)
    db_session.commit()
    db_session.refresh(sub)
    return sub


def _grade(client, headers, submission_id, mentor_id, score=7.5, text="Nice structure"):
    return client.put(
        f"/api/Submission/{submission_id}/grade",
        json={"mentorScore": score, "feedbackContent": text, "mentorId": mentor_id},
        headers=headers,
    )


class TestGrading:
    def test_grade_sets_score_and_status(self, client, db_session, mentor, mentor_headers, writing_submission):
        resp = _grade(client, mentor_headers, writing_submission.id, mentor.id)
        assert resp.status_code == 200
        body = resp.json()
        assert body["mentorScore"] == 7.5
        assert body["status"] == "Graded"

        feedback = db_session.query(Feedback).filter(Feedback.submission_id == writing_submission.id).one()
        assert feedback.feedback_text == "Nice structure"
        assert feedback.mentor_id == mentor.id

    def test_grading_twice_keeps_one_feedback(self, client, db_session, mentor, mentor_headers, writing_submission):
        _grade(client, mentor_headers, writing_submission.id, mentor.id, score=6.0, text="First pass")
        resp = _grade(client, mentor_headers, writing_submission.id, mentor.id, score=8.0, text="Second pass")
        assert resp.status_code == 200
        assert resp.json()["mentorScore"] == 8.0

        rows = db_session.query(Feedback).filter(Feedback.submission_id == writing_submission.id).all()
        assert len(rows) == 1
        assert rows[0].feedback_text == "Second pass"

    def test_score_out_of_range(self, client, mentor, mentor_headers, writing_submission):
        resp = _grade(client, mentor_headers, writing_submission.id, mentor.id, score=11)
        assert resp.status_code == 400

    def test_unknown_submission(self, client, mentor, mentor_headers):
        assert _grade(client, mentor_headers, 999, mentor.id).status_code == 404

    def test_students_cannot_grade(self, client, student_headers, mentor, writing_submission):
        assert _grade(client, student_headers, writing_submission.id, mentor.id).status_code == 403

    def test_graded_submission_leaves_mentor_queue(self, client, mentor, mentor_headers, writing_submission):
        assert len(client.get("/api/Submission/mentor", headers=mentor_headers).json()) == 1
        _grade(client, mentor_headers, writing_submission.id, mentor.id)
        assert client.get("/api/Submission/mentor", headers=mentor_headers).json() == []

    def test_history_shows_mentor_score(self, client, student, mentor, mentor_headers, writing_submission):
        _grade(client, mentor_headers, writing_submission.id, mentor.id, score=7.5)
        (row,) = client.get(f"/api/Submission/user/{student.id}/history").json()
        assert row["scoreFormatted"] == "7.5/10"


class TestFeedbackThread:
    def test_no_feedback_yet(self, client, writing_submission):
        assert client.get(f"/api/Submission/feedback/{writing_submission.id}").status_code == 404

    def test_thread_with_replies_in_order(
        self, client, db_session, student, mentor, mentor_headers, writing_submission
    ):
        _grade(client, mentor_headers, writing_submission.id, mentor.id)
        feedback = db_session.query(Feedback).one()

        base = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
        db_session.add_all(
            [
                FeedbackReply(feedback_id=feedback.id, user_id=mentor.id, reply_text="later", created_at=base + timedelta(minutes=5)),
                FeedbackReply(feedback_id=feedback.id, user_id=student.id, reply_text="earlier", created_at=base),
            ]
        )
        db_session.commit()

        resp = client.get(f"/api/Submission/feedback/{writing_submission.id}")
        assert resp.status_code == 200
        body = resp.json()
        assert body["feedbackId"] == feedback.id
        assert body["mentorName"] == "Test Mentor"
        assert body["feedbackText"] == "Nice structure"
        assert [r["replyText"] for r in body["replies"]] == ["earlier", "later"]
        assert body["replies"][0]["userName"] == "Test Student"

    def test_add_reply(self, client, db_session, student, mentor, mentor_headers, writing_submission):
        _grade(client, mentor_headers, writing_submission.id, mentor.id)
        feedback = db_session.query(Feedback).one()

        resp = client.post(
            "/api/Submission/feedback/reply",
            json={"feedbackId": feedback.id, "userId": student.id, "replyText": "  Thanks!  "},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["replyId"] > 0
        assert body["replyText"] == "Thanks!"
        assert body["userName"] == "Test Student"

        thread = client.get(f"/api/Submission/feedback/{writing_submission.id}").json()
        assert len(thread["replies"]) == 1

        history = client.get(f"/api/Submission/user/{student.id}/history").json()
        assert history[0]["replyCount"] == 1

    def test_reply_to_unknown_feedback(self, client, student):
        resp = client.post(
            "/api/Submission/feedback/reply",
            json={"feedbackId": 404, "userId": student.id, "replyText": "hello"},
        )
        assert resp.status_code == 404

    def test_blank_reply_is_rejected(self, client, db_session, student, mentor, mentor_headers, writing_submission):
        _grade(client, mentor_headers, writing_submission.id, mentor.id)
        feedback = db_session.query(Feedback).one()
        resp = client.post(
            "/api/Submission/feedback/reply",
            json={"feedbackId": feedback.id, "userId": student.id, "replyText": "   "},
        )
        assert resp.status_code == 400
