# 가입 서비스 레이어
# - 입력 형식 검사, 이메일/생체키 중복 체크, 회원가입
# - 기존 사용자에게 생체키 추가 등록
#
# 주니어 개발자님께: 여기서 하는 중복 조회는 "친절한 에러"를 빨리 주기 위한 것입니다.
# 동시에 들어온 가입 요청 사이의 경쟁은 저장소의 unique 인덱스가 최종적으로 막고,
# 그때 올라오는 UniqueConstraintError 를 같은 에러 종류로 바꿔서 돌려줍니다.

import logging
from typing import List, Optional

from ..core.exceptions import (
    DuplicateBiometricKey,
    DuplicateEmail,
    InvalidCredentials,
    StoreUnavailable,
    UniqueConstraintError,
)
from ..core.guards import call_store, run_hashing
from ..core.security import BiometricFingerprinter, CredentialHasher
from ..core.validation import validate_biometric_key, validate_email_address, validate_password
from ..models.user import BiometricKey, User
from ..repositories.base import CredentialStore
from ..schemas.user_schema import UserPublic

logger = logging.getLogger(__name__)


def _to_public(user: User) -> UserPublic:
    return UserPublic(id=user.id, email=user.email, biometric_key_count=len(user.biometric_keys))


def _translate_unique_error(error: UniqueConstraintError) -> Exception:
    if error.field == UniqueConstraintError.EMAIL:
        return DuplicateEmail()
    if error.field == UniqueConstraintError.BIOMETRIC_FINGERPRINT:
        return DuplicateBiometricKey()
    return StoreUnavailable()


class RegistrationService:
    def __init__(
        self,
        store: CredentialStore,
        hasher: CredentialHasher,
        fingerprinter: BiometricFingerprinter,
        store_timeout: float = 5.0,
        hash_timeout: float = 5.0,
    ):
        self.store = store
        self.hasher = hasher
        self.fingerprinter = fingerprinter
        self.store_timeout = store_timeout
        self.hash_timeout = hash_timeout

    async def register_standard(self, email: str, password: str) -> UserPublic:
        validate_email_address(email)
        validate_password(password)
        return await self._register(email, password, None)

    async def register_with_biometric(self, email: str, password: str, biometric_key: str) -> UserPublic:
        validate_email_address(email)
        validate_password(password)
        validate_biometric_key(biometric_key)
        return await self._register(email, password, biometric_key)

    async def enroll_biometric(self, user_id: str, biometric_key: str) -> UserPublic:
        """이미 가입한 사용자에게 생체키를 하나 더 등록합니다."""
        validate_biometric_key(biometric_key)

        user = await call_store(self.store.get(user_id), self.store_timeout, "get")
        if user is None:
            raise InvalidCredentials()

        key = await self._new_biometric_key(biometric_key)
        try:
            updated = await call_store(
                self.store.append_biometric_key(user_id, key), self.store_timeout, "append_biometric_key"
            )
        except UniqueConstraintError as e:
            logger.info(f"[Registration] biometric enrollment rejected by store (user={user_id})")
            raise _translate_unique_error(e) from None
        if updated is None:
            raise InvalidCredentials()

        logger.info(f"[Registration] biometric key enrolled (user={user_id}, keys={len(updated.biometric_keys)})")
        return _to_public(updated)

    async def _register(self, email: str, password: str, biometric_key: Optional[str]) -> UserPublic:
        existing = await call_store(self.store.find_by_email(email), self.store_timeout, "find_by_email")
        if existing:
            logger.info("[Registration] rejected: email already registered")
            raise DuplicateEmail()

        biometric_keys: List[BiometricKey] = []
        if biometric_key is not None:
            biometric_keys.append(await self._new_biometric_key(biometric_key))

        password_hash = await run_hashing(
            self.hasher.hash, password, timeout=self.hash_timeout, operation="hash_password"
        )
        try:
            user = await call_store(
                self.store.insert(email, password_hash, biometric_keys), self.store_timeout, "insert"
            )
        except UniqueConstraintError as e:
            # 조회와 저장 사이에 같은 이메일/생체키로 다른 가입이 먼저 끝난 경우
            logger.info(f"[Registration] insert rejected by store: {e.field}")
            raise _translate_unique_error(e) from None

        logger.info(f"[Registration] user registered (user={user.id}, biometric={bool(biometric_keys)})")
        return _to_public(user)

    async def _new_biometric_key(self, biometric_key: str) -> BiometricKey:
        # 지문은 결정적이라 다른 모든 사용자의 생체키와 바로 비교할 수 있다
        fingerprint = self.fingerprinter.fingerprint(biometric_key)
        owner = await call_store(
            self.store.find_by_biometric_fingerprint(fingerprint),
            self.store_timeout,
            "find_by_biometric_fingerprint",
        )
        if owner:
            logger.info("[Registration] rejected: biometric key already registered")
            raise DuplicateBiometricKey()

        key_hash = await run_hashing(
            self.hasher.hash, biometric_key, timeout=self.hash_timeout, operation="hash_biometric_key"
        )
        return BiometricKey(key_hash=key_hash, fingerprint=fingerprint)
