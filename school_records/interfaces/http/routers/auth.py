from fastapi import APIRouter, Depends, FastAPI, Request, status
from slowapi import Limiter
from sqlalchemy.orm import Session

from ....application.policy import Action, Identity
from ....application.use_cases.authenticate_user import AuthenticateUser
from ....application.use_cases.register_user import RegisterUser
from ....domain.entities import Role
from ....infrastructure.db import get_db
from ....infrastructure.repositories import UserRepository
from ....infrastructure.security import PasswordHasher
from ..authz import get_identity, require
from ..ratelimit import LOGIN_RATE_LIMIT
from ..schemas import RegisterReq, LoginReq, LoginResp, UserResp

router = APIRouter(tags=["auth"])

@router.post("/register", response_model=UserResp, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterReq,
    db: Session = Depends(get_db),
    _: Identity = Depends(require(Action.REGISTER_USER)),
):
    uc = RegisterUser(repo=UserRepository(db), hasher=PasswordHasher())
    user = uc.execute(payload.username, payload.password, Role(payload.type))
    return UserResp(username=user.username, type=user.role.value)

def _login_impl(
    request: Request,
    payload: LoginReq,
    db: Session,
):
    uc = AuthenticateUser(
        repo=UserRepository(db),
        hasher=PasswordHasher(),
        tokens=request.app.state.token_service,
    )
    result = uc.execute(payload.username, payload.password)
    return LoginResp(username=result.username, type=result.role.value, token=result.token)

def bind_rate_limits(app: FastAPI, limiter: Limiter) -> None:
    """Оборачивает обработчики лимитером приложения. Вызывается один раз в create_app."""
    app.state.limited_login = limiter.limit(LOGIN_RATE_LIMIT)(_login_impl)

def get_limited_login(request: Request):
    return request.app.state.limited_login

# Более строгий лимит для логина (защита от брутфорса)
@router.post("/login", response_model=LoginResp)
def login(
    request: Request,
    payload: LoginReq,
    db: Session = Depends(get_db),
    limited_login=Depends(get_limited_login),
):
    return limited_login(request, payload, db)

@router.get("/me", response_model=UserResp)
def me(identity: Identity = Depends(get_identity)):
    return UserResp(username=identity.username, type=identity.role.value)
