# 서비스 예외 -> HTTP 응답 변환
# 주니어 개발자님께: ErrorKind 의 모든 값이 여기 매핑되어 있어야 합니다.
# 새 에러 종류를 추가하면 이 표도 같이 고쳐야 하고, 테스트가 이를 확인합니다.

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from ..core.exceptions import ErrorKind, IdentityError

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorKind.INVALID_INPUT: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.DUPLICATE_EMAIL: status.HTTP_409_CONFLICT,
    ErrorKind.DUPLICATE_BIOMETRIC_KEY: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
}


async def identity_error_handler(request: Request, exc: IdentityError) -> JSONResponse:
    status_code = ERROR_STATUS[exc.kind]
    headers = None
    if exc.kind is ErrorKind.INVALID_CREDENTIALS:
        headers = {"WWW-Authenticate": "Bearer"}
    if status_code >= 500:
        logger.warning(f"[API] {request.url.path} -> {status_code} ({exc.kind.value})")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": exc.kind.value},
        headers=headers,
    )
