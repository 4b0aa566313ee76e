"""역할 상수와 권한 판정 헬퍼입니다."""

STUDENT = "student"
TEACHER = "teacher"
ADMIN = "admin"

SELF_REGISTER_ROLES = (STUDENT, TEACHER)
STAFF_ROLES = (TEACHER, ADMIN)


def can_view_all_reports(user) -> bool:
    return user.role in STAFF_ROLES
