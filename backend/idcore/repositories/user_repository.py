# 사용자 저장소 레이어 (MongoDB / Beanie)
# - 데이터 접근(조회/생성/생체키 추가)만 담당 (서비스 로직 분리)
# - pymongo 예외는 여기서 UniqueConstraintError / StoreUnavailable 로 바꿔서 올린다

import logging
from typing import List, Optional

from beanie import PydanticObjectId, UpdateResponse
from beanie.operators import Push, Set
from bson import ObjectId
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..core.exceptions import StoreUnavailable, UniqueConstraintError
from ..models.user import BiometricKey, User, UserDocument, utc_now

logger = logging.getLogger(__name__)

FINGERPRINT_FIELD = "biometric_keys.fingerprint"
FINGERPRINT_INDEX = "biometric_fingerprint_unique"


def unique_field_from_error(error: DuplicateKeyError) -> str:
    """DuplicateKeyError 가 어떤 unique 인덱스에서 났는지 찾아낸다."""
    details = error.details or {}
    key_pattern = details.get("keyPattern") or {}
    if FINGERPRINT_FIELD in key_pattern:
        return UniqueConstraintError.BIOMETRIC_FINGERPRINT
    if "email" in key_pattern:
        return UniqueConstraintError.EMAIL
    # 오래된 서버는 keyPattern 없이 errmsg 에 인덱스 이름만 준다
    message = details.get("errmsg") or str(error)
    if FINGERPRINT_INDEX in message or FINGERPRINT_FIELD in message:
        return UniqueConstraintError.BIOMETRIC_FINGERPRINT
    return UniqueConstraintError.EMAIL


class UserRepository:
    async def find_by_email(self, email: str) -> Optional[User]:
        try:
            document = await UserDocument.find_one(UserDocument.email == email)
        except PyMongoError as e:
            logger.error(f"[UserRepository] find_by_email failed: {e}", exc_info=True)
            raise StoreUnavailable() from e
        return document.to_domain() if document else None

    async def find_by_biometric_fingerprint(self, fingerprint: str) -> Optional[User]:
        try:
            document = await UserDocument.find_one({FINGERPRINT_FIELD: fingerprint})
        except PyMongoError as e:
            logger.error(f"[UserRepository] find_by_biometric_fingerprint failed: {e}", exc_info=True)
            raise StoreUnavailable() from e
        return document.to_domain() if document else None

    async def get(self, user_id: str) -> Optional[User]:
        if not ObjectId.is_valid(user_id):
            return None
        try:
            document = await UserDocument.get(PydanticObjectId(user_id))
        except PyMongoError as e:
            logger.error(f"[UserRepository] get failed: {e}", exc_info=True)
            raise StoreUnavailable() from e
        return document.to_domain() if document else None

    async def insert(self, email: str, password_hash: str, biometric_keys: List[BiometricKey]) -> User:
        document = UserDocument(
            email=email,
            password_hash=password_hash,
            biometric_keys=list(biometric_keys),
        )
        try:
            await document.insert()
        except DuplicateKeyError as e:
            field = unique_field_from_error(e)
            logger.info(f"[UserRepository] insert rejected by unique index: {field}")
            raise UniqueConstraintError(field) from e
        except PyMongoError as e:
            logger.error(f"[UserRepository] insert failed: {e}", exc_info=True)
            raise StoreUnavailable() from e
        return document.to_domain()

    async def append_biometric_key(self, user_id: str, key: BiometricKey) -> Optional[User]:
        if not ObjectId.is_valid(user_id):
            return None
        try:
            document = await UserDocument.find_one(
                UserDocument.id == PydanticObjectId(user_id)
            ).update(
                Push({UserDocument.biometric_keys: key.model_dump()}),
                Set({UserDocument.updated_at: utc_now()}),
                response_type=UpdateResponse.NEW_DOCUMENT,
            )
        except DuplicateKeyError as e:
            logger.info(f"[UserRepository] biometric key rejected by unique index (user={user_id})")
            raise UniqueConstraintError(unique_field_from_error(e)) from e
        except PyMongoError as e:
            logger.error(f"[UserRepository] append_biometric_key failed: {e}", exc_info=True)
            raise StoreUnavailable() from e
        return document.to_domain() if document else None
