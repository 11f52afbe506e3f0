from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from ....application.policy import Action
from ....domain.entities import PROFESSOR_ID_PATTERN, COURSE_ID_PATTERN
from ....infrastructure.db import get_db
from ....infrastructure.repositories import ProfessorRepository, StudentRepository, CourseRepository
from ..authz import require
from ..schemas import ProfessorCreate, ProfessorOut, StudentOut, CourseOut

router = APIRouter(prefix="/professors", tags=["professors"])

@router.post("", response_model=ProfessorOut, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require(Action.CREATE_PROFESSOR))])
def create_professor(payload: ProfessorCreate, db: Session = Depends(get_db)):
    return ProfessorRepository(db).create(
        professor_id=payload.professor_id,
        name=payload.name,
        surname=payload.surname,
        salary=payload.salary,
        hire_date=payload.hire_date,
    )

@router.get("", response_model=list[ProfessorOut],
            dependencies=[Depends(require(Action.LIST_PROFESSORS))])
def list_professors(db: Session = Depends(get_db),
                    limit: int = Query(10, ge=1, le=100),
                    offset: int = Query(0, ge=0)):
    return ProfessorRepository(db).list(limit=limit, offset=offset)

@router.get("/{professor_id}", response_model=ProfessorOut,
            dependencies=[Depends(require(Action.READ_PROFESSOR))])
def get_professor(professor_id: str = Path(pattern=PROFESSOR_ID_PATTERN), db: Session = Depends(get_db)):
    return ProfessorRepository(db).get(professor_id)

@router.delete("/{professor_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(require(Action.DELETE_PROFESSOR))])
def delete_professor(professor_id: str = Path(pattern=PROFESSOR_ID_PATTERN), db: Session = Depends(get_db)):
    ProfessorRepository(db).delete(professor_id)

@router.get("/{professor_id}/students", response_model=list[StudentOut],
            dependencies=[Depends(require(Action.LIST_PROFESSOR_STUDENTS))])
def professor_students(professor_id: str = Path(pattern=PROFESSOR_ID_PATTERN),
                       db: Session = Depends(get_db),
                       limit: int = Query(10, ge=1, le=100),
                       offset: int = Query(0, ge=0)):
    ProfessorRepository(db).require(professor_id)
    return StudentRepository(db).of_professor(professor_id, limit=limit, offset=offset)

@router.patch("/{professor_id}/courses/{course_id}", response_model=CourseOut,
              dependencies=[Depends(require(Action.ASSIGN_PROFESSOR))])
def assign_professor(professor_id: str = Path(pattern=PROFESSOR_ID_PATTERN),
                     course_id: str = Path(pattern=COURSE_ID_PATTERN),
                     db: Session = Depends(get_db)):
    return CourseRepository(db).assign_professor(course_id, professor_id)
