# artify/api/routes/auth.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from artify.core.security import Principal, create_session, end_session, get_current_user
from artify.db.base import get_db
from artify.schemas.user import LoginRequest, PrincipalResponse, RegisterRequest
from artify.services import identity

router = APIRouter(tags=["auth"])


def _principal_response(principal: Principal) -> PrincipalResponse:
    return PrincipalResponse(
        id=principal.id,
        role=principal.role,
        email=principal.record.email,
        name=principal.record.name,
    )


@router.post("/register", response_model=PrincipalResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, request: Request, db: Session = Depends(get_db)):
    principal = identity.register(db, **payload.model_dump())
    create_session(request, principal, remember=False)
    return _principal_response(principal)


@router.post("/login", response_model=PrincipalResponse)
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)):
    principal = identity.authenticate(db, payload.role, payload.email, payload.password)
    create_session(request, principal, remember=payload.remember)
    return _principal_response(principal)


@router.post("/logout")
def logout(request: Request):
    end_session(request)
    return {"success": True}


@router.get("/me", response_model=PrincipalResponse)
def me(principal: Principal = Depends(get_current_user)):
    return _principal_response(principal)
