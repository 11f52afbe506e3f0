from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from ....application.policy import Action
from ....domain.entities import COURSE_ID_PATTERN
from ....infrastructure.db import get_db
from ....infrastructure.repositories import CourseRepository
from ..authz import require
from ..schemas import CourseCreate, CourseOut, CourseRankingOut

router = APIRouter(prefix="/courses", tags=["courses"])

@router.get("", response_model=list[CourseOut],
            dependencies=[Depends(require(Action.LIST_COURSES))])
def list_courses(db: Session = Depends(get_db),
                 limit: int = Query(10, ge=1, le=100),
                 offset: int = Query(0, ge=0)):
    return CourseRepository(db).list(limit=limit, offset=offset)

@router.get("/{course_id}", response_model=CourseOut,
            dependencies=[Depends(require(Action.READ_COURSE))])
def get_course(course_id: str = Path(pattern=COURSE_ID_PATTERN), db: Session = Depends(get_db)):
    return CourseRepository(db).get(course_id)

@router.get("/{course_id}/rank", response_model=list[CourseRankingOut],
            dependencies=[Depends(require(Action.READ_COURSE_RANKING))])
def course_rank(course_id: str = Path(pattern=COURSE_ID_PATTERN), db: Session = Depends(get_db)):
    return CourseRepository(db).ranking(course_id)

# --- Admin-only CRUD:

@router.post("", response_model=CourseOut, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require(Action.CREATE_COURSE))])
def create_course(payload: CourseCreate, db: Session = Depends(get_db)):
    return CourseRepository(db).create(payload.course_id, payload.name, payload.description)

@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(require(Action.DELETE_COURSE))])
def delete_course(course_id: str = Path(pattern=COURSE_ID_PATTERN), db: Session = Depends(get_db)):
    CourseRepository(db).delete(course_id)
