# 인증 서비스 레이어
# - 이메일/비밀번호 로그인
# - 생체키 로그인 (지문으로 후보 조회 -> 솔트 해시로 재검증)
# - 성공 시 JWT 액세스 토큰 발급
#
# 주니어 개발자님께: 사용자가 없을 때도 더미 해시 검증을 한 번 돌립니다.
# 그래야 "없는 이메일"과 "틀린 비밀번호"의 응답 시간이 비슷해져서
# 응답 시간으로 가입 여부를 알아낼 수 없습니다.

import logging

from ..core.exceptions import InvalidCredentials
from ..core.guards import call_store, run_hashing
from ..core.security import BiometricFingerprinter, CredentialHasher, IssuedToken, TokenIssuer
from ..core.validation import is_acceptable_secret
from ..repositories.base import CredentialStore

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        store: CredentialStore,
        hasher: CredentialHasher,
        fingerprinter: BiometricFingerprinter,
        token_issuer: TokenIssuer,
        store_timeout: float = 5.0,
        hash_timeout: float = 5.0,
    ):
        self.store = store
        self.hasher = hasher
        self.fingerprinter = fingerprinter
        self.token_issuer = token_issuer
        self.store_timeout = store_timeout
        self.hash_timeout = hash_timeout

    async def login_standard(self, email: str, password: str) -> IssuedToken:
        # 인코딩할 수 없는 이메일은 저장소까지 보내지 않고 "없는 사용자"로 처리
        user = None
        if is_acceptable_secret(email):
            user = await call_store(self.store.find_by_email(email), self.store_timeout, "find_by_email")
        if not user:
            await self._dummy_verify()
            logger.info("[Auth] password login failed")
            raise InvalidCredentials()

        verified = await run_hashing(
            self.hasher.verify, password, user.password_hash,
            timeout=self.hash_timeout, operation="verify_password",
        )
        if not verified:
            logger.info("[Auth] password login failed")
            raise InvalidCredentials()

        logger.info(f"[Auth] password login succeeded (user={user.id})")
        return self.token_issuer.issue(user.id)

    async def login_biometric(self, biometric_key: str) -> IssuedToken:
        # 빈 값, 너무 긴 값, UTF-8 로 인코딩 안 되는 값은 "등록 안 된 키"와 똑같이 실패시킨다
        if not is_acceptable_secret(biometric_key):
            await self._dummy_verify()
            logger.info("[Auth] biometric login failed")
            raise InvalidCredentials()

        fingerprint = self.fingerprinter.fingerprint(biometric_key)
        user = await call_store(
            self.store.find_by_biometric_fingerprint(fingerprint),
            self.store_timeout,
            "find_by_biometric_fingerprint",
        )
        enrolled = user.find_biometric_key(fingerprint) if user else None
        if enrolled is None:
            await self._dummy_verify()
            logger.info("[Auth] biometric login failed")
            raise InvalidCredentials()

        # 지문 충돌에 대비해 느린 솔트 해시로 한 번 더 확인
        verified = await run_hashing(
            self.hasher.verify, biometric_key, enrolled.key_hash,
            timeout=self.hash_timeout, operation="verify_biometric_key",
        )
        if not verified:
            logger.info("[Auth] biometric login failed")
            raise InvalidCredentials()

        logger.info(f"[Auth] biometric login succeeded (user={user.id})")
        return self.token_issuer.issue(user.id)

    async def _dummy_verify(self) -> None:
        await run_hashing(self.hasher.dummy_verify, timeout=self.hash_timeout, operation="dummy_verify")
