from app.schemas.assignment import Assignment, IndividualStudents
from app.schemas.context import UserContext


def _has_role(role, wanted: str) -> bool:
    return role == wanted or (isinstance(role, (list, tuple, set)) and wanted in role)


def is_teacher(user: UserContext) -> bool:
    return _has_role(user.role, "teacher")


def is_student(user: UserContext) -> bool:
    return _has_role(user.role, "student")


def is_owner(assignment: Assignment, user_id: str) -> bool:
    return assignment.createdBy == user_id


def is_visible_to(assignment: Assignment, student_id: str) -> bool:
    """Regola di visibilita': 'all' vede chiunque, 'individual' solo chi e' nel set."""
    if isinstance(assignment.visibility, IndividualStudents):
        return student_id in assignment.visibility.students
    return True
