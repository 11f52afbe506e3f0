from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ...application.policy import Action, Identity, Target, authorize
from ...domain.errors import Unauthenticated
from ...infrastructure.db import get_db
from ...infrastructure.repositories import RelationshipRepository

# auto_error=False: без заголовка отвечаем 401, а не 403
bearer = HTTPBearer(auto_error=False)

def get_identity(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> Identity:
    if creds is None or not creds.credentials:
        raise Unauthenticated("Missing authorization header")
    return request.app.state.token_service.identify(creds.credentials)

def require(action: Action):
    """Зависимость FastAPI: проверка роли и владения для действия ``action``.

    Идентификаторы из пути (student_id, professor_id, course_id) проверяются
    на формат до обращения к БД.
    """
    def dependency(
        request: Request,
        identity: Identity = Depends(get_identity),
        db: Session = Depends(get_db),
    ) -> Identity:
        target = Target.from_params(request.path_params)
        authorize(identity, action, target, lookup=RelationshipRepository(db))
        return identity

    dependency.__name__ = f"require_{action.value}"
    return dependency
