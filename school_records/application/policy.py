"""Table-driven authorization.

Every protected endpoint names one ``Action``. ``authorize`` first applies
the role gate of that action and then, for roles that are scoped to their
own records, the ownership check registered for the role.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Protocol

import structlog

from ..domain.entities import Role, validate_id
from ..domain.errors import Denied, Forbidden

logger = structlog.get_logger(__name__)


class Action(str, Enum):
    REGISTER_USER = "register_user"
    CREATE_STUDENT = "create_student"
    DELETE_STUDENT = "delete_student"
    READ_STUDENT = "read_student"
    LIST_STUDENTS = "list_students"
    ENROLL_STUDENT = "enroll_student"
    CREATE_PROFESSOR = "create_professor"
    DELETE_PROFESSOR = "delete_professor"
    READ_PROFESSOR = "read_professor"
    LIST_PROFESSORS = "list_professors"
    LIST_PROFESSOR_STUDENTS = "list_professor_students"
    CREATE_COURSE = "create_course"
    DELETE_COURSE = "delete_course"
    READ_COURSE = "read_course"
    LIST_COURSES = "list_courses"
    ASSIGN_PROFESSOR = "assign_professor"
    ASSIGN_RESULT = "assign_result"
    READ_STUDENT_RESULTS = "read_student_results"
    READ_STUDENT_STATISTICS = "read_student_statistics"
    READ_COURSE_RANKING = "read_course_ranking"


class Ownership(str, Enum):
    SELF_STUDENT = "self_student"
    SELF_PROFESSOR = "self_professor"
    TEACHES_COURSE = "teaches_course"
    TEACHES_ENROLLED_STUDENT = "teaches_enrolled_student"


@dataclass(frozen=True)
class Identity:
    username: str
    role: Role


@dataclass(frozen=True)
class Target:
    student_id: str | None = None
    professor_id: str | None = None
    course_id: str | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "Target":
        values = {}
        for kind in ("student", "professor", "course"):
            key = f"{kind}_id"
            if key in params:
                values[key] = validate_id(kind, params[key])
        return cls(**values)


@dataclass(frozen=True)
class Rule:
    roles: frozenset
    ownership: Mapping[Role, Ownership] = field(default_factory=dict)


class RelationshipLookup(Protocol):
    def teaches_course(self, professor_id: str, course_id: str) -> bool: ...
    def teaches_enrolled_student(self, professor_id: str, student_id: str, course_id: str) -> bool: ...


ADMIN = frozenset({Role.ADMIN})
ADMIN_PROFESSOR = frozenset({Role.ADMIN, Role.PROFESSOR})
EVERYONE = frozenset(Role)

POLICY: dict[Action, Rule] = {
    Action.REGISTER_USER: Rule(ADMIN),
    Action.CREATE_STUDENT: Rule(ADMIN),
    Action.DELETE_STUDENT: Rule(ADMIN),
    Action.READ_STUDENT: Rule(EVERYONE, {Role.STUDENT: Ownership.SELF_STUDENT}),
    Action.LIST_STUDENTS: Rule(ADMIN),
    Action.ENROLL_STUDENT: Rule(ADMIN),
    Action.CREATE_PROFESSOR: Rule(ADMIN),
    Action.DELETE_PROFESSOR: Rule(ADMIN),
    Action.READ_PROFESSOR: Rule(ADMIN_PROFESSOR, {Role.PROFESSOR: Ownership.SELF_PROFESSOR}),
    Action.LIST_PROFESSORS: Rule(ADMIN),
    Action.LIST_PROFESSOR_STUDENTS: Rule(ADMIN_PROFESSOR, {Role.PROFESSOR: Ownership.SELF_PROFESSOR}),
    Action.CREATE_COURSE: Rule(ADMIN),
    Action.DELETE_COURSE: Rule(ADMIN),
    Action.READ_COURSE: Rule(EVERYONE),
    Action.LIST_COURSES: Rule(EVERYONE),
    Action.ASSIGN_PROFESSOR: Rule(ADMIN),
    Action.ASSIGN_RESULT: Rule(ADMIN_PROFESSOR, {Role.PROFESSOR: Ownership.TEACHES_ENROLLED_STUDENT}),
    Action.READ_STUDENT_RESULTS: Rule(EVERYONE, {Role.STUDENT: Ownership.SELF_STUDENT}),
    Action.READ_STUDENT_STATISTICS: Rule(ADMIN_PROFESSOR),
    Action.READ_COURSE_RANKING: Rule(ADMIN_PROFESSOR, {Role.PROFESSOR: Ownership.TEACHES_COURSE}),
}


def _owns(check: Ownership, identity: Identity, target: Target, lookup: RelationshipLookup | None) -> bool:
    if check is Ownership.SELF_STUDENT:
        return target.student_id == identity.username
    if check is Ownership.SELF_PROFESSOR:
        return target.professor_id == identity.username
    if lookup is None:
        raise RuntimeError(f"Ownership check {check.value} needs a relationship lookup")
    if check is Ownership.TEACHES_COURSE:
        return lookup.teaches_course(identity.username, target.course_id)
    return lookup.teaches_enrolled_student(identity.username, target.student_id, target.course_id)


def authorize(
    identity: Identity,
    action: Action,
    target: Target = Target(),
    lookup: RelationshipLookup | None = None,
) -> None:
    """Raise ``Denied`` when the role gate fails, ``Forbidden`` when ownership fails."""
    rule = POLICY[action]
    if identity.role not in rule.roles:
        logger.info("access_denied", action=action.value, role=identity.role.value,
                    subject=identity.username, reason="role")
        raise Denied(f"Role {identity.role.value} may not {action.value.replace('_', ' ')}",
                     action=action.value, reason="role")

    check = rule.ownership.get(identity.role)
    if check is not None and not _owns(check, identity, target, lookup):
        logger.info("access_denied", action=action.value, role=identity.role.value,
                    subject=identity.username, reason=check.value)
        raise Forbidden(action=action.value, reason=check.value)
