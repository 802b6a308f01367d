# 보안/인증 유틸리티
# - 비밀번호/생체키 해싱 및 검증 (passlib)
# - 생체키 조회용 지문 계산 (HMAC-SHA256)
# - JWT 액세스 토큰 발급/검증 (PyJWT)
#
# 주니어 개발자님께: 이 모듈의 클래스들은 전역 설정을 직접 읽지 않습니다.
# 앱 시작 시 설정값을 넣어 한 번 만들고, 서비스에 주입해서 씁니다.

import hashlib
import hmac
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from .exceptions import ConfigurationError, InvalidCredentials

SUPPORTED_JWT_ALGORITHMS = ("HS256", "HS384", "HS512")
ACCESS_TOKEN_TYPE = "access"


class CredentialHasher:
    """느린 솔트 해시로 비밀번호/생체키를 저장하고 검증합니다.

    새 해시는 bcrypt_sha256 으로 만듭니다. bcrypt 는 72바이트 이후를 잘라버리므로
    긴 생체키도 전체가 반영되도록 SHA-256 을 한 번 거칩니다.
    예전 방식(plain bcrypt) 해시도 검증은 됩니다.
    """

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt_sha256", "bcrypt"],
            deprecated="auto",
            bcrypt_sha256__rounds=rounds,
            bcrypt__rounds=rounds,
        )

    def hash(self, plaintext: str) -> str:
        return self._context.hash(plaintext)

    def verify(self, plaintext: str, hash_value: str) -> bool:
        # 빈 입력이나 깨진 해시도 예외 대신 False.
        # 틀린 비밀번호와 같은 시간이 걸리도록 더미 검증을 대신 돌린다.
        if not plaintext or not hash_value or self._context.identify(hash_value) is None:
            self.dummy_verify()
            return False
        try:
            return self._context.verify(plaintext, hash_value)
        except (ValueError, TypeError):
            self.dummy_verify()
            return False

    def dummy_verify(self) -> None:
        """사용자를 못 찾았을 때도 실제 검증과 비슷한 CPU 시간을 소모합니다."""
        self._context.dummy_verify()


class BiometricFingerprinter:
    """생체키의 빠르고 결정적인 지문(HMAC-SHA256)을 계산합니다.

    지문은 조회/중복 검사 전용입니다. 인증은 항상 CredentialHasher.verify 로 다시 확인합니다.
    """

    def __init__(self, key: str):
        if not key:
            raise ConfigurationError("BIOMETRIC_FINGERPRINT_KEY is not configured")
        self._key = key.encode("utf-8")

    def fingerprint(self, biometric_key: str) -> str:
        return hmac.new(self._key, biometric_key.encode("utf-8"), hashlib.sha256).hexdigest()


class IssuedToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenClaims(BaseModel):
    sub: str
    iat: int
    exp: int
    type: str


class TokenIssuer:
    """사용자 id 에 묶인 서명된 액세스 토큰을 발급합니다.

    토큰 형태: JWS compact (header.payload.signature)
    payload: {"sub": user_id, "iat": ..., "nbf": ..., "exp": ..., "type": "access"}
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expires_minutes: int = 30):
        # 잘못된 서명 설정은 요청 단위 에러가 아니라 시작 실패로 처리한다
        if not secret_key:
            raise ConfigurationError("JWT_SECRET_KEY is not configured")
        if algorithm not in SUPPORTED_JWT_ALGORITHMS:
            raise ConfigurationError(f"Unsupported JWT algorithm: {algorithm}")
        if expires_minutes <= 0:
            raise ConfigurationError("ACCESS_TOKEN_EXPIRE_MINUTES must be positive")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expires_delta = timedelta(minutes=expires_minutes)

    def issue(self, user_id: str) -> IssuedToken:
        now = datetime.now(tz=timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": now,
            "nbf": now,
            "exp": now + self._expires_delta,
            "type": ACCESS_TOKEN_TYPE,
        }
        token = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        return IssuedToken(
            access_token=token,
            expires_in=int(self._expires_delta.total_seconds()),
        )

    def decode(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.PyJWTError:
            raise InvalidCredentials()
        if payload.get("type") != ACCESS_TOKEN_TYPE:
            raise InvalidCredentials()
        return TokenClaims(**payload)
