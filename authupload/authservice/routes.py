from __future__ import annotations
from fastapi import APIRouter, Depends, status

from .contracts import AuthResult, LoginRequest, MeResponse, PublicUser, RefreshRequest, RegisterRequest, TokenPair
from .deps import get_current_user
from .service import AuthService, get_auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResult, status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest, svc: AuthService = Depends(get_auth_service)):
    return svc.register(req)


@router.post("/login", response_model=AuthResult)
def login(req: LoginRequest, svc: AuthService = Depends(get_auth_service)):
    return svc.login(req)


@router.post("/refresh", response_model=TokenPair)
def refresh(req: RefreshRequest, svc: AuthService = Depends(get_auth_service)):
    return svc.refresh(req)


@router.get("/me", response_model=MeResponse)
def me(current_user: PublicUser = Depends(get_current_user)):
    return MeResponse(user=current_user)
