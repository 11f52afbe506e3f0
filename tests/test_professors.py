import pytest

from school_records.domain.entities import Role


def test_create_professor(client, admin_headers):
    """Тест создания преподавателя"""
    response = client.post(
        "/professors",
        json={"professor_id": "P10", "name": "Grace", "surname": "Hopper",
              "salary": 4200.5, "hire_date": "2015-02-01"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.json() == {"professor_id": "P10", "name": "Grace", "surname": "Hopper",
                               "salary": 4200.5, "hire_date": "2015-02-01"}

def test_create_professor_twice(client, admin_headers):
    payload = {"professor_id": "P10", "name": "Grace", "surname": "Hopper"}
    assert client.post("/professors", json=payload, headers=admin_headers).status_code == 201
    assert client.post("/professors", json=payload, headers=admin_headers).status_code == 409

@pytest.mark.parametrize("payload", [
    {"professor_id": "S10", "name": "Grace", "surname": "Hopper"},
    {"professor_id": "P10", "name": "Grace", "surname": "Hopper", "salary": 0},
    {"professor_id": "P10", "name": "Grace", "surname": "Hopper", "salary": -100},
    {"professor_id": "P10", "name": "Grace", "surname": "Hopper", "hire_date": "yesterday"},
])
def test_create_professor_validation(client, admin_headers, payload):
    assert client.post("/professors", json=payload, headers=admin_headers).status_code == 400

def test_professor_reads_own_record_only(client, school, headers_for):
    """P1 видит свою карточку, но не карточку P2"""
    headers = headers_for("P1", Role.PROFESSOR)
    response = client.get("/professors/P1", headers=headers)
    assert response.status_code == 200
    assert response.json()["surname"] == "Lovelace"
    assert client.get("/professors/P2", headers=headers).status_code == 403

def test_student_cannot_read_professor(client, school, headers_for):
    assert client.get("/professors/P1", headers=headers_for("S1", Role.STUDENT)).status_code == 403

def test_get_professor_not_found(client, admin_headers):
    assert client.get("/professors/P404", headers=admin_headers).status_code == 404

def test_list_professors(client, school, admin_headers, headers_for):
    response = client.get("/professors", headers=admin_headers)
    assert response.status_code == 200
    assert [p["professor_id"] for p in response.json()] == ["P1", "P2"]
    assert client.get("/professors", headers=headers_for("P1", Role.PROFESSOR)).status_code == 403

def test_delete_professor(client, school, admin_headers):
    """После удаления преподавателя курс остаётся без преподавателя"""
    assert client.delete("/professors/P1", headers=admin_headers).status_code == 204
    assert client.get("/professors/P1", headers=admin_headers).status_code == 404
    assert client.get("/courses/C1", headers=admin_headers).json()["professor_id"] is None
    assert client.delete("/professors/P1", headers=admin_headers).status_code == 404

def test_professor_students(client, school, admin_headers, headers_for):
    """Тест списка студентов преподавателя"""
    response = client.get("/professors/P1/students", headers=headers_for("P1", Role.PROFESSOR))
    assert response.status_code == 200
    assert [s["student_id"] for s in response.json()] == ["S1", "S2"]

    response = client.get("/professors/P2/students", headers=admin_headers)
    assert [s["student_id"] for s in response.json()] == ["S3"]

def test_professor_cannot_list_other_professors_students(client, school, headers_for):
    response = client.get("/professors/P2/students", headers=headers_for("P1", Role.PROFESSOR))
    assert response.status_code == 403

def test_professor_students_missing_professor(client, admin_headers):
    assert client.get("/professors/P404/students", headers=admin_headers).status_code == 404

def test_assign_professor_to_course(client, school, admin_headers):
    response = client.patch("/professors/P2/courses/C3", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["professor_id"] == "P2"

    # повторное назначение заменяет преподавателя
    response = client.patch("/professors/P1/courses/C3", headers=admin_headers)
    assert response.json()["professor_id"] == "P1"

def test_assign_professor_missing_entities(client, school, admin_headers):
    assert client.patch("/professors/P404/courses/C3", headers=admin_headers).status_code == 404
    assert client.patch("/professors/P1/courses/C404", headers=admin_headers).status_code == 404

def test_assign_professor_requires_admin(client, school, headers_for):
    response = client.patch("/professors/P1/courses/C3", headers=headers_for("P1", Role.PROFESSOR))
    assert response.status_code == 403
