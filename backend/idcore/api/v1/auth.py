# 인증 라우터
# - 회원가입: POST /api/v1/auth/register
# - 생체키 포함 회원가입: POST /api/v1/auth/register/biometric
# - 로그인: POST /api/v1/auth/login
# - 생체키 로그인: POST /api/v1/auth/login/biometric
# - 생체키 추가 등록: POST /api/v1/auth/biometric-keys (인증 필요)

from fastapi import APIRouter, Depends, status

from ...schemas.user_schema import (
    BiometricEnroll,
    BiometricLogin,
    BiometricUserCreate,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserPublic,
)
from ...services.auth_service import AuthService
from ...services.registration_service import RegistrationService
from ..deps import get_auth_service, get_current_user_id, get_registration_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED,
             summary="회원가입 (이메일 중복 체크 포함)")
async def register(payload: UserCreate, service: RegistrationService = Depends(get_registration_service)):
    return await service.register_standard(payload.email, payload.password)


@router.post("/register/biometric", response_model=UserPublic, status_code=status.HTTP_201_CREATED,
             summary="생체키 포함 회원가입 (이메일/생체키 중복 체크 포함)")
async def register_biometric(payload: BiometricUserCreate,
                             service: RegistrationService = Depends(get_registration_service)):
    return await service.register_with_biometric(payload.email, payload.password, payload.biometric_key)


@router.post("/login", response_model=TokenResponse, summary="로그인 (JWT Access 토큰 발급)")
async def login(payload: UserLogin, service: AuthService = Depends(get_auth_service)):
    token = await service.login_standard(payload.email, payload.password)
    return token.model_dump()


@router.post("/login/biometric", response_model=TokenResponse, summary="생체키 로그인 (JWT Access 토큰 발급)")
async def login_biometric(payload: BiometricLogin, service: AuthService = Depends(get_auth_service)):
    token = await service.login_biometric(payload.biometric_key)
    return token.model_dump()


@router.post("/biometric-keys", response_model=UserPublic, status_code=status.HTTP_201_CREATED,
             summary="생체키 추가 등록")
async def enroll_biometric(payload: BiometricEnroll,
                           user_id: str = Depends(get_current_user_id),
                           service: RegistrationService = Depends(get_registration_service)):
    return await service.enroll_biometric(user_id, payload.biometric_key)
