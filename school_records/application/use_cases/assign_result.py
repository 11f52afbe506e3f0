from ...domain.entities import Enrollment, validate_id, validate_result


class IEnrollmentRepository:
    def set_result(self, student_id: str, course_id: str, result: int) -> Enrollment: ...


class AssignResult:
    """Выставляет (или перезаписывает) оценку студента по курсу."""

    def __init__(self, repo: IEnrollmentRepository):
        self.repo = repo

    def execute(self, student_id: str, course_id: str, result: int) -> Enrollment:
        validate_id("student", student_id)
        validate_id("course", course_id)
        validate_result(result)
        return self.repo.set_result(student_id, course_id, result)
