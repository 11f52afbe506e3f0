import pytest

from school_records.domain.entities import Role


def test_admin_assigns_result(client, school, admin_headers):
    """Тест выставления оценки администратором"""
    response = client.patch("/students/S1/courses/C1/results", json={"result": 28}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"student_id": "S1", "course_id": "C1", "result": 28}

def test_professor_grades_own_enrolled_student(client, school, headers_for):
    headers = headers_for("P1", Role.PROFESSOR)
    response = client.patch("/students/S2/courses/C1/results", json={"result": 19}, headers=headers)
    assert response.status_code == 200

    # перезапись оценки без истории
    response = client.patch("/students/S2/courses/C1/results", json={"result": 24}, headers=headers)
    assert response.json()["result"] == 24

def test_professor_cannot_grade_student_outside_own_courses(client, school, headers_for):
    """P1 не ведёт ни одного курса, на который записан S3: 403"""
    headers = headers_for("P1", Role.PROFESSOR)
    assert client.patch("/students/S3/courses/C2/results", json={"result": 20}, headers=headers).status_code == 403
    assert client.patch("/students/S3/courses/C1/results", json={"result": 20}, headers=headers).status_code == 403

def test_student_cannot_grade(client, school, headers_for):
    response = client.patch("/students/S1/courses/C1/results", json={"result": 30},
                            headers=headers_for("S1", Role.STUDENT))
    assert response.status_code == 403

@pytest.mark.parametrize("result", [-1, 31, "thirty"])
def test_result_out_of_range(client, school, admin_headers, result):
    response = client.patch("/students/S1/courses/C1/results", json={"result": result}, headers=admin_headers)
    assert response.status_code == 400

def test_result_without_enrollment(client, school, admin_headers):
    """Оценка студенту, не записанному на курс: 404"""
    response = client.patch("/students/S3/courses/C1/results", json={"result": 20}, headers=admin_headers)
    assert response.status_code == 404

def test_result_for_missing_student_or_course(client, school, admin_headers):
    assert client.patch("/students/S99/courses/C1/results", json={"result": 20},
                        headers=admin_headers).status_code == 404
    assert client.patch("/students/S1/courses/C99/results", json={"result": 20},
                        headers=admin_headers).status_code == 404

def _grade(client, headers, student_id, course_id, result):
    response = client.patch(f"/students/{student_id}/courses/{course_id}/results",
                            json={"result": result}, headers=headers)
    assert response.status_code == 200

def test_student_reads_own_results(client, school, admin_headers, headers_for):
    """Студент видит свои оценки и не видит чужие"""
    client.post("/students/S1/courses/C2", headers=admin_headers)
    _grade(client, admin_headers, "S1", "C1", 27)
    _grade(client, admin_headers, "S1", "C2", 18)

    headers = headers_for("S1", Role.STUDENT)
    response = client.get("/students/S1/courses/results", headers=headers)
    assert response.status_code == 200
    assert response.json() == [
        {"course_id": "C1", "course_name": "Algebra", "result": 27},
        {"course_id": "C2", "course_name": "Biology", "result": 18},
    ]
    assert client.get("/students/S2/courses/results", headers=headers).status_code == 403

def test_professor_sees_results_of_own_courses_only(client, school, admin_headers, headers_for):
    client.post("/students/S1/courses/C2", headers=admin_headers)
    _grade(client, admin_headers, "S1", "C1", 27)
    _grade(client, admin_headers, "S1", "C2", 18)

    response = client.get("/students/S1/courses/results", headers=headers_for("P2", Role.PROFESSOR))
    assert response.status_code == 200
    assert [r["course_id"] for r in response.json()] == ["C2"]

def test_results_of_missing_student(client, admin_headers):
    assert client.get("/students/S404/courses/results", headers=admin_headers).status_code == 404
