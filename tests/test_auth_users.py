# tests/test_auth_users.py
import pytest

from ielts_portal.models.feedback import Feedback
from ielts_portal.models.rating import Rating
from ielts_portal.models.submission import Submission
from ielts_portal.models.user import User


def _register(client, email="new.student@ielts.com", password="secret123", **extra):
    payload = {"email": email, "password": password, "fullName": "New Student", **extra}
    return client.post("/api/Auth/register", json=payload)


class TestAuth:
    def test_register_and_login(self, client):
        resp = _register(client)
        assert resp.status_code == 201
        body = resp.json()
        assert body["userId"] > 0
        assert body["role"] == "student"
        assert body["status"] == "Active"
        assert "passwordHash" not in body

        resp = client.post("/api/Auth/login", json={"email": "new.student@ielts.com", "password": "secret123"})
        assert resp.status_code == 200
        token = resp.json()["access_token"]
        assert resp.json()["token_type"] == "bearer"

        me = client.get("/api/Auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "new.student@ielts.com"

    def test_oauth_form_login(self, client):
        _register(client)
        resp = client.post("/api/Auth/token", data={"username": "new.student@ielts.com", "password": "secret123"})
        assert resp.status_code == 200
        assert resp.json()["access_token"]

    def test_mentor_registration_waits_for_approval(self, client):
        resp = _register(client, email="new.mentor@ielts.com", role="mentor", experience="8.5 overall")
        assert resp.status_code == 201
        assert resp.json()["approved"] is False
        assert resp.json()["experience"] == "8.5 overall"

    def test_admin_cannot_self_register(self, client):
        assert _register(client, role="admin").status_code == 400

    def test_duplicate_email(self, client):
        _register(client)
        assert _register(client).status_code == 400

    def test_wrong_password(self, client):
        _register(client)
        resp = client.post("/api/Auth/login", json={"email": "new.student@ielts.com", "password": "nope-nope"})
        assert resp.status_code == 401

    def test_banned_user_cannot_login(self, client, db_session):
        user_id = _register(client).json()["userId"]
        user = db_session.get(User, user_id)
        user.status = "Banned"
        db_session.commit()

        resp = client.post("/api/Auth/login", json={"email": "new.student@ielts.com", "password": "secret123"})
        assert resp.status_code == 403

    def test_me_requires_token(self, client):
        assert client.get("/api/Auth/me").status_code == 401
        assert client.get("/api/Auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401

    def test_update_profile(self, client):
        _register(client)
        token = client.post(
            "/api/Auth/login", json={"email": "new.student@ielts.com", "password": "secret123"}
        ).json()["access_token"]
        headers = {"Authorization": f"Bearer {token}"}

        resp = client.put(
            "/api/Auth/update-profile",
            json={"fullName": "Renamed Student", "gender": "female", "dateOfBirth": "2001-04-05", "password": "another1"},
            headers=headers,
        )
        assert resp.status_code == 200
        assert resp.json()["fullName"] == "Renamed Student"
        assert resp.json()["dateOfBirth"] == "2001-04-05"

        resp = client.post("/api/Auth/login", json={"email": "new.student@ielts.com", "password": "another1"})
        assert resp.status_code == 200


class TestUserAdministration:
    @pytest.fixture
    def many_students(self, make_user):
        return [
            make_user(f"s{i}@ielts.com", f"Student {name}")
            for i, name in enumerate(["Carol", "Alice", "Bob"])
        ]

    def test_admin_only(self, client, student_headers, mentor_headers):
        assert client.get("/api/User/", headers=student_headers).status_code == 403
        assert client.get("/api/User/", headers=mentor_headers).status_code == 403

    def test_filter_sort_and_page(self, client, admin_headers, many_students, mentor):
        resp = client.get(
            "/api/User/",
            params={"role": "student", "sortBy": "fullName", "sortDirection": "asc", "pageSize": 2},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert [u["fullName"] for u in body["users"]] == ["Student Alice", "Student Bob"]
        assert body["totalCount"] == 3
        assert body["totalPages"] == 2
        assert body["hasNextPage"] is True
        assert body["hasPreviousPage"] is False

        body = client.get(
            "/api/User/",
            params={"role": "student", "sortBy": "fullName", "sortDirection": "asc", "pageSize": 2, "page": 2},
            headers=admin_headers,
        ).json()
        assert [u["fullName"] for u in body["users"]] == ["Student Carol"]
        assert body["hasNextPage"] is False

    def test_search_term(self, client, admin_headers, many_students):
        body = client.get("/api/User/", params={"searchTerm": "bob"}, headers=admin_headers).json()
        assert [u["fullName"] for u in body["users"]] == ["Student Bob"]

    def test_bad_sort_column(self, client, admin_headers):
        assert client.get("/api/User/", params={"sortBy": "password"}, headers=admin_headers).status_code == 400

    def test_role_lists(self, client, admin_headers, student, mentor):
        students = client.get("/api/User/students", headers=admin_headers).json()
        mentors = client.get("/api/User/mentors", headers=admin_headers).json()
        assert [u["userId"] for u in students] == [student.id]
        assert [u["userId"] for u in mentors] == [mentor.id]

    def test_role_status_and_approval(self, client, admin_headers, mentor):
        resp = client.put(f"/api/User/{mentor.id}/approve", json={"approved": True}, headers=admin_headers)
        assert resp.json()["approved"] is True

        resp = client.put(
            f"/api/User/{mentor.id}/status", json={"status": "Suspended", "reason": "spam"}, headers=admin_headers
        )
        assert resp.json()["status"] == "Suspended"

        resp = client.put(f"/api/User/{mentor.id}/role", json={"role": "admin"}, headers=admin_headers)
        assert resp.json()["role"] == "admin"

        resp = client.put(f"/api/User/{mentor.id}/status", json={"status": "Gone"}, headers=admin_headers)
        assert resp.status_code == 400

    def test_delete(self, client, db_session, admin, admin_headers, student):
        student_id = student.id
        assert client.delete(f"/api/User/{student_id}", headers=admin_headers).status_code == 204
        db_session.expire_all()
        assert db_session.get(User, student_id) is None
        assert client.get(f"/api/User/{student_id}", headers=admin_headers).status_code == 404

    def test_admin_cannot_delete_self(self, client, admin, admin_headers):
        assert client.delete(f"/api/User/{admin.id}", headers=admin_headers).status_code == 400


class TestMentorManagement:
    def test_management_row(self, client, db_session, admin_headers, mentor, student):
        for _ in range(2):
            sub = Submission(user_id=student.id, exam_type="writing", exam_id=1, answers="", status="Graded")
            db_session.add(sub)
            db_session.commit()
            db_session.add(Feedback(submission_id=sub.id, mentor_id=mentor.id, feedback_text="ok"))
        db_session.add_all(
            [
                Rating(student_id=student.id, mentor_id=mentor.id, score=5),
                Rating(student_id=student.id, mentor_id=mentor.id, score=4),
            ]
        )
        db_session.commit()

        resp = client.get(f"/api/Mentor/management/{mentor.id}", headers=admin_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["totalStudents"] == 1
        assert body["averageRating"] == 4.5

    def test_students_are_not_mentors(self, client, admin_headers, student):
        assert client.get(f"/api/Mentor/management/{student.id}", headers=admin_headers).status_code == 404

    def test_ban_and_unban(self, client, admin_headers, mentor, mentor_headers):
        resp = client.post(f"/api/Mentor/{mentor.id}/ban", json={"reason": "abuse"}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["status"] == "Banned"
        # existing tokens stop working
        assert client.get("/api/Auth/me", headers=mentor_headers).status_code == 403

        resp = client.post(f"/api/Mentor/{mentor.id}/unban", headers=admin_headers)
        assert resp.json()["status"] == "Active"
        assert client.get("/api/Auth/me", headers=mentor_headers).status_code == 200

    def test_ban_needs_reason(self, client, admin_headers, mentor):
        assert client.post(f"/api/Mentor/{mentor.id}/ban", json={"reason": ""}, headers=admin_headers).status_code == 400

    def test_statistics(self, client, db_session, admin_headers, mentor, make_user):
        make_user("m2@ielts.com", "Banned Mentor", role="mentor", status="Banned")
        mentor.approved = True
        db_session.commit()

        body = client.get("/api/Mentor/statistics", headers=admin_headers).json()
        assert body == {
            "totalMentors": 2,
            "activeMentors": 1,
            "bannedMentors": 1,
            "pendingApproval": 0,
            "approvedMentors": 1,
        }
