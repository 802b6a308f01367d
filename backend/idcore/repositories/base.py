# 자격증명 저장소 인터페이스
# - 서비스 레이어는 이 Protocol 만 알고, 실제 저장 방식(MongoDB, 메모리)은 모른다
# - unique 제약(이메일, 생체키 지문)은 저장소가 보장해야 한다
#   (애플리케이션 레벨의 "조회 후 삽입"은 동시 요청에서 경쟁 상태가 생긴다)

from typing import List, Optional, Protocol

from ..models.user import BiometricKey, User


class CredentialStore(Protocol):
    async def find_by_email(self, email: str) -> Optional[User]:
        ...

    async def find_by_biometric_fingerprint(self, fingerprint: str) -> Optional[User]:
        ...

    async def get(self, user_id: str) -> Optional[User]:
        ...

    async def insert(self, email: str, password_hash: str, biometric_keys: List[BiometricKey]) -> User:
        """새 사용자 저장. 이메일/지문 충돌 시 UniqueConstraintError."""
        ...

    async def append_biometric_key(self, user_id: str, key: BiometricKey) -> Optional[User]:
        """생체키 추가. 지문 충돌 시 UniqueConstraintError, 사용자가 없으면 None."""
        ...
