# Package marker
from ielts_portal.db.base import Base  # noqa
from ielts_portal.models.user import User  # noqa
from ielts_portal.models.user_otp import UserOtp  # noqa
from ielts_portal.models.exam_set import ExamSet  # noqa
from ielts_portal.models.exam import ReadingExam, ListeningExam, SpeakingExam, WritingExam  # noqa
from ielts_portal.models.exam_course import ExamCourse, ExamCourseExamSet  # noqa
from ielts_portal.models.submission import Submission  # noqa
from ielts_portal.models.feedback import Feedback, FeedbackReply  # noqa
from ielts_portal.models.tip import Tip  # noqa
from ielts_portal.models.rating import Rating  # noqa
