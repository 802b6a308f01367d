# FastAPI 의존성
# - 앱 시작 시 만들어 둔 구성요소(app.state)로 서비스를 조립한다
# - Bearer 토큰에서 현재 사용자 id 를 꺼낸다

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from ..core.config import Settings, get_settings
from ..services.auth_service import AuthService
from ..services.registration_service import RegistrationService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


def get_registration_service(request: Request, settings: Settings = Depends(get_settings)) -> RegistrationService:
    state = request.app.state
    return RegistrationService(
        state.store,
        state.hasher,
        state.fingerprinter,
        store_timeout=settings.STORE_TIMEOUT_SECONDS,
        hash_timeout=settings.HASH_TIMEOUT_SECONDS,
    )


def get_auth_service(request: Request, settings: Settings = Depends(get_settings)) -> AuthService:
    state = request.app.state
    return AuthService(
        state.store,
        state.hasher,
        state.fingerprinter,
        state.token_issuer,
        store_timeout=settings.STORE_TIMEOUT_SECONDS,
        hash_timeout=settings.HASH_TIMEOUT_SECONDS,
    )


def get_current_user_id(request: Request, token: str = Depends(oauth2_scheme)) -> str:
    # 유효하지 않거나 만료된 토큰은 InvalidCredentials -> 401
    claims = request.app.state.token_issuer.decode(token)
    return claims.sub
