from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from ....application.policy import Action, Identity
from ....application.use_cases.assign_result import AssignResult
from ....domain.entities import Role, STUDENT_ID_PATTERN, COURSE_ID_PATTERN
from ....infrastructure.db import get_db
from ....infrastructure.repositories import StudentRepository, EnrollmentRepository
from ..authz import require
from ..schemas import (
    StudentCreate, StudentOut, EnrollmentOut, ResultReq, StudentResultOut, StudentStatisticOut,
)

router = APIRouter(prefix="/students", tags=["students"])

@router.post("", response_model=StudentOut, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require(Action.CREATE_STUDENT))])
def create_student(payload: StudentCreate, db: Session = Depends(get_db)):
    return StudentRepository(db).create(
        student_id=payload.student_id,
        name=payload.name,
        surname=payload.surname,
        birth_date=payload.birth_date,
        enrollment_date=payload.enrollment_date,
    )

@router.get("", response_model=list[StudentOut],
            dependencies=[Depends(require(Action.LIST_STUDENTS))])
def list_students(db: Session = Depends(get_db),
                  limit: int = Query(10, ge=1, le=100),
                  offset: int = Query(0, ge=0)):
    return StudentRepository(db).list(limit=limit, offset=offset)

# объявлен до /{student_id}, иначе "statistics" попадёт в параметр пути
@router.get("/statistics", response_model=list[StudentStatisticOut],
            dependencies=[Depends(require(Action.READ_STUDENT_STATISTICS))])
def student_statistics(db: Session = Depends(get_db),
                       limit: int = Query(10, ge=1, le=100),
                       offset: int = Query(0, ge=0)):
    return StudentRepository(db).statistics(limit=limit, offset=offset)

@router.get("/{student_id}", response_model=StudentOut,
            dependencies=[Depends(require(Action.READ_STUDENT))])
def get_student(student_id: str = Path(pattern=STUDENT_ID_PATTERN), db: Session = Depends(get_db)):
    return StudentRepository(db).get(student_id)

@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(require(Action.DELETE_STUDENT))])
def delete_student(student_id: str = Path(pattern=STUDENT_ID_PATTERN), db: Session = Depends(get_db)):
    StudentRepository(db).delete(student_id)

@router.post("/{student_id}/courses/{course_id}", response_model=EnrollmentOut,
             status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require(Action.ENROLL_STUDENT))])
def enroll_student(student_id: str = Path(pattern=STUDENT_ID_PATTERN),
                   course_id: str = Path(pattern=COURSE_ID_PATTERN),
                   db: Session = Depends(get_db)):
    return EnrollmentRepository(db).enroll(student_id, course_id)

@router.patch("/{student_id}/courses/{course_id}/results", response_model=EnrollmentOut,
              dependencies=[Depends(require(Action.ASSIGN_RESULT))])
def assign_result(payload: ResultReq,
                  student_id: str = Path(pattern=STUDENT_ID_PATTERN),
                  course_id: str = Path(pattern=COURSE_ID_PATTERN),
                  db: Session = Depends(get_db)):
    uc = AssignResult(repo=EnrollmentRepository(db))
    return uc.execute(student_id, course_id, payload.result)

@router.get("/{student_id}/courses/results", response_model=list[StudentResultOut])
def student_results(student_id: str = Path(pattern=STUDENT_ID_PATTERN),
                    identity: Identity = Depends(require(Action.READ_STUDENT_RESULTS)),
                    db: Session = Depends(get_db)):
    # преподаватель видит только оценки по своим курсам
    professor_id = identity.username if identity.role is Role.PROFESSOR else None
    return EnrollmentRepository(db).results_of(student_id, professor_id=professor_id)
