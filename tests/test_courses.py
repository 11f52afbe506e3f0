from school_records.domain.entities import Role


def test_create_course(client, admin_headers):
    """Тест создания курса"""
    response = client.post(
        "/courses",
        json={"course_id": "C10", "name": "Physics", "description": "Mechanics"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.json() == {"course_id": "C10", "name": "Physics",
                               "description": "Mechanics", "professor_id": None}

def test_create_course_twice(client, admin_headers):
    payload = {"course_id": "C10", "name": "Physics"}
    assert client.post("/courses", json=payload, headers=admin_headers).status_code == 201
    assert client.post("/courses", json=payload, headers=admin_headers).status_code == 409

def test_create_course_invalid_id(client, admin_headers):
    response = client.post("/courses", json={"course_id": "Physics", "name": "Physics"}, headers=admin_headers)
    assert response.status_code == 400

def test_create_course_requires_admin(client, headers_for):
    response = client.post("/courses", json={"course_id": "C10", "name": "Physics"},
                           headers=headers_for("P1", Role.PROFESSOR))
    assert response.status_code == 403

def test_course_readable_by_every_role(client, school, headers_for):
    for username, role in [("admin", Role.ADMIN), ("P2", Role.PROFESSOR), ("S3", Role.STUDENT)]:
        response = client.get("/courses/C1", headers=headers_for(username, role))
        assert response.status_code == 200
        assert response.json()["professor_id"] == "P1"

def test_list_courses_with_pagination(client, school, headers_for):
    """Тест пагинации курсов"""
    headers = headers_for("S1", Role.STUDENT)
    response = client.get("/courses?limit=2&offset=0", headers=headers)
    assert [c["course_id"] for c in response.json()] == ["C1", "C2"]
    response = client.get("/courses?limit=2&offset=2", headers=headers)
    assert [c["course_id"] for c in response.json()] == ["C3"]

def test_get_course_not_found(client, admin_headers):
    assert client.get("/courses/C404", headers=admin_headers).status_code == 404

def test_delete_course(client, school, admin_headers):
    assert client.delete("/courses/C1", headers=admin_headers).status_code == 204
    assert client.get("/courses/C1", headers=admin_headers).status_code == 404
    assert client.delete("/courses/C1", headers=admin_headers).status_code == 404
    # записи на удалённый курс тоже исчезли
    assert client.get("/professors/P1/students", headers=admin_headers).json() == []

def _grade(client, headers, student_id, course_id, result):
    response = client.patch(f"/students/{student_id}/courses/{course_id}/results",
                            json={"result": result}, headers=headers)
    assert response.status_code == 200

def test_course_rank(client, school, admin_headers, headers_for):
    """Результаты [30, 30, 20] дают места [1, 1, 3]"""
    client.post("/students/S3/courses/C1", headers=admin_headers)
    _grade(client, admin_headers, "S1", "C1", 30)
    _grade(client, admin_headers, "S2", "C1", 20)
    _grade(client, admin_headers, "S3", "C1", 30)

    response = client.get("/courses/C1/rank", headers=headers_for("P1", Role.PROFESSOR))
    assert response.status_code == 200
    assert [(r["student"]["student_id"], r["result"], r["rank"]) for r in response.json()] == [
        ("S1", 30, 1),
        ("S3", 30, 1),
        ("S2", 20, 3),
    ]

def test_course_rank_other_professor_forbidden(client, school, headers_for):
    assert client.get("/courses/C1/rank", headers=headers_for("P2", Role.PROFESSOR)).status_code == 403

def test_course_rank_student_denied(client, school, headers_for):
    assert client.get("/courses/C1/rank", headers=headers_for("S1", Role.STUDENT)).status_code == 403

def test_course_rank_missing_course(client, admin_headers):
    assert client.get("/courses/C404/rank", headers=admin_headers).status_code == 404
