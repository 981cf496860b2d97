# tests/conftest.py
import os

# Point the app at SQLite before anything reads settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("OPENAI_API_KEY", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ielts_portal.core.config import settings
from ielts_portal.core.security import create_access_token
from ielts_portal.db.base import Base
from ielts_portal.db.session import get_db
from ielts_portal.main import app
from ielts_portal.models.exam import ListeningExam, ReadingExam, WritingExam
from ielts_portal.models.exam_course import ExamCourse, ExamCourseExamSet
from ielts_portal.models.exam_set import ExamSet
from ielts_portal.models.user import User
from ielts_portal.schemas.score import CriterionScore, WritingScoreResult
from ielts_portal.services import ai_client
from ielts_portal.services.mail_service import get_mail_sender

TEST_DATABASE_URL = "sqlite://"


@pytest.fixture(scope="function")
def db_session():
    """One in-memory database per test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


class RecordingMailSender:
    """Keeps sent mail in memory instead of talking to SMTP."""

    def __init__(self):
        self.messages = []

    def send(self, to, subject, body):
        self.messages.append({"to": to, "subject": subject, "body": body})

    def last_code(self, to):
        body = [m["body"] for m in self.messages if m["to"] == to][-1]
        return body.rsplit(" ", 1)[-1]


@pytest.fixture
def outbox():
    return RecordingMailSender()


@pytest.fixture
def client(db_session, outbox):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mail_sender] = lambda: outbox
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def upload_root(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_ROOT", str(tmp_path))
    return tmp_path


# Users

def _make_user(db, *, email, full_name, role, status="Active"):
    user = User(
        email=email,
        # Pre-hashed password to avoid running bcrypt in tests
        password_hash="$2b$12$hashed_password_001",
        full_name=full_name,
        role=role,
        status=status,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def student(db_session):
    return _make_user(db_session, email="student@ielts.com", full_name="Test Student", role="student")


@pytest.fixture
def mentor(db_session):
    return _make_user(db_session, email="mentor@ielts.com", full_name="Test Mentor", role="mentor")


@pytest.fixture
def admin(db_session):
    return _make_user(db_session, email="admin@ielts.com", full_name="Test Admin", role="admin")


@pytest.fixture
def make_user(db_session):
    def _make(email, full_name, role="student", status="Active"):
        return _make_user(db_session, email=email, full_name=full_name, role=role, status=status)

    return _make


def auth_header(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user.email})}"}


@pytest.fixture
def student_headers(student):
    return auth_header(student)


@pytest.fixture
def mentor_headers(mentor):
    return auth_header(mentor)


@pytest.fixture
def admin_headers(admin):
    return auth_header(admin)


# Exams

@pytest.fixture
def reading_set(db_session):
    exam_set = ExamSet(
        exam_type="reading",
        exam_set_code="RS_20250101000000",
        exam_set_title="Academic Reading Set 1",
        total_questions=3,
        context="The history of the bicycle...",
    )
    db_session.add(exam_set)
    db_session.commit()
    db_session.refresh(exam_set)

    items = [
        ReadingExam(exam_set_id=exam_set.id, question_text="Q1", option_a="x", option_b="y", correct_answer="B"),
        ReadingExam(exam_set_id=exam_set.id, question_text="Q2", correct_answer="Paris"),
        ReadingExam(exam_set_id=exam_set.id, question_text="Q3", correct_answer="1817; eighteen seventeen"),
    ]
    db_session.add_all(items)
    db_session.commit()
    for item in items:
        db_session.refresh(item)
    exam_set.items = items
    return exam_set


@pytest.fixture
def listening_set(db_session):
    exam_set = ExamSet(
        exam_type="listening",
        exam_set_code="LS_20250101000000",
        exam_set_title="Listening Set 1",
        total_questions=2,
    )
    db_session.add(exam_set)
    db_session.commit()
    db_session.refresh(exam_set)

    items = [
        ListeningExam(exam_set_id=exam_set.id, audio_url="/uploads/audio/a.mp3", correct_answer="C"),
        ListeningExam(exam_set_id=exam_set.id, audio_url="/uploads/audio/a.mp3", correct_answer="library"),
    ]
    db_session.add_all(items)
    db_session.commit()
    for item in items:
        db_session.refresh(item)
    exam_set.items = items
    return exam_set


@pytest.fixture
def writing_set(db_session):
    exam_set = ExamSet(
        exam_type="writing",
        exam_set_code="WS_20250101000000",
        exam_set_title="Writing Set 1",
        total_questions=1,
    )
    db_session.add(exam_set)
    db_session.commit()
    db_session.refresh(exam_set)
    return exam_set


@pytest.fixture
def writing_exam(db_session, writing_set):
    exam = WritingExam(
        exam_set_id=writing_set.id,
        task1_title="Chart",
        task1_description="Describe the chart",
        task1_min_words=150,
        task2_title="Essay",
        task2_question="Discuss X",
        task2_min_words=250,
    )
    db_session.add(exam)
    db_session.commit()
    db_session.refresh(exam)
    return exam


@pytest.fixture
def make_course(db_session):
    def _make(exam_type: str, exam_sets=(), title="Course"):
        course = ExamCourse(
            course_title=title,
            course_code=f"EC_{title.upper()}",
            description="",
            exam_type=exam_type,
        )
        db_session.add(course)
        db_session.commit()
        db_session.refresh(course)
        for exam_set in exam_sets:
            db_session.add(
                ExamCourseExamSet(
                    exam_course_id=course.id,
                    exam_set_id=exam_set.id,
                    exam_set_type=exam_set.exam_type,
                )
            )
        db_session.commit()
        return course

    return _make


# AI scoring

def sample_score(band="6.5") -> WritingScoreResult:
    return WritingScoreResult(
        overall_band=band,
        task_achievement=CriterionScore(score=6, feedback="Covers the task"),
        coherence_cohesion=CriterionScore(score=7, feedback="Well organised"),
        lexical_resource=CriterionScore(score=6, feedback="Adequate range"),
        grammatical_range=CriterionScore(score=7, feedback="Mostly accurate"),
        general_feedback="Solid response",
    )


@pytest.fixture
def fake_ai(monkeypatch):
    """Replace the OpenAI call; records every (prompt, response, type) it sees."""
    calls = []

    def _score(prompt, response, writing_type):
        calls.append((prompt, response, writing_type))
        return sample_score()

    monkeypatch.setattr(ai_client, "score_writing", _score)
    return calls


@pytest.fixture
def failing_ai(monkeypatch):
    def _score(prompt, response, writing_type):
        raise ai_client.AIScoringError("service down")

    monkeypatch.setattr(ai_client, "score_writing", _score)
