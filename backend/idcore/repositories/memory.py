# 메모리 저장소
# - 로컬 실행(STORE_BACKEND=memory)과 테스트용
# - MongoDB unique 인덱스와 같은 제약을 쓰기 시점에 직접 검사한다
#
# 주니어 개발자님께: 각 메서드는 중간에 await 하지 않으므로, 하나의 이벤트 루프 안에서는
# "검사 후 쓰기"가 다른 요청에 끼어들 틈 없이 한 번에 끝납니다.

import uuid
from typing import Dict, List, Optional

from ..core.exceptions import UniqueConstraintError
from ..models.user import BiometricKey, User, utc_now


class InMemoryUserRepository:
    def __init__(self):
        self._users: Dict[str, User] = {}
        self._ids_by_email: Dict[str, str] = {}
        self._ids_by_fingerprint: Dict[str, str] = {}

    async def find_by_email(self, email: str) -> Optional[User]:
        return self._lookup(self._ids_by_email.get(email))

    async def find_by_biometric_fingerprint(self, fingerprint: str) -> Optional[User]:
        return self._lookup(self._ids_by_fingerprint.get(fingerprint))

    async def get(self, user_id: str) -> Optional[User]:
        return self._lookup(user_id)

    async def insert(self, email: str, password_hash: str, biometric_keys: List[BiometricKey]) -> User:
        if email in self._ids_by_email:
            raise UniqueConstraintError(UniqueConstraintError.EMAIL)
        fingerprints = [key.fingerprint for key in biometric_keys]
        if len(set(fingerprints)) != len(fingerprints) or any(fp in self._ids_by_fingerprint for fp in fingerprints):
            raise UniqueConstraintError(UniqueConstraintError.BIOMETRIC_FINGERPRINT)

        now = utc_now()
        user = User(
            id=uuid.uuid4().hex,
            email=email,
            password_hash=password_hash,
            biometric_keys=list(biometric_keys),
            created_at=now,
            updated_at=now,
        )
        self._users[user.id] = user
        self._ids_by_email[email] = user.id
        for fp in fingerprints:
            self._ids_by_fingerprint[fp] = user.id
        return user.model_copy(deep=True)

    async def append_biometric_key(self, user_id: str, key: BiometricKey) -> Optional[User]:
        user = self._users.get(user_id)
        if user is None:
            return None
        if key.fingerprint in self._ids_by_fingerprint:
            raise UniqueConstraintError(UniqueConstraintError.BIOMETRIC_FINGERPRINT)

        user.biometric_keys.append(key)
        user.updated_at = utc_now()
        self._ids_by_fingerprint[key.fingerprint] = user_id
        return user.model_copy(deep=True)

    def _lookup(self, user_id: Optional[str]) -> Optional[User]:
        if user_id is None or user_id not in self._users:
            return None
        return self._users[user_id].model_copy(deep=True)
