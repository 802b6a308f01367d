# User 도메인 모델
# - User: 서비스 레이어가 다루는 사용자 레코드 (저장소 종류와 무관)
# - UserDocument: MongoDB 에 저장되는 Beanie Document
# - 이메일은 unique 인덱스, 생체키 지문은 전체 사용자에 걸친 unique 인덱스
#
# 주니어 개발자님께: 이메일은 대소문자를 구분해서 입력 그대로 저장합니다.
# "A@x.com"과 "a@x.com"은 서로 다른 사용자입니다.

from datetime import datetime, timezone
from typing import List

from beanie import Document, Indexed, Insert, Replace, SaveChanges, Update, before_event
from pydantic import BaseModel, Field
from pymongo import ASCENDING, IndexModel


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class BiometricKey(BaseModel):
    key_hash: str = Field(repr=False)  # 검증용 느린 솔트 해시
    fingerprint: str = Field(repr=False)  # 조회/중복 검사용 HMAC 지문
    enrolled_at: datetime = Field(default_factory=utc_now)


class User(BaseModel):
    id: str
    email: str
    password_hash: str = Field(repr=False)
    biometric_keys: List[BiometricKey] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def biometric_key_hashes(self) -> List[str]:
        return [key.key_hash for key in self.biometric_keys]

    def find_biometric_key(self, fingerprint: str):
        for key in self.biometric_keys:
            if key.fingerprint == fingerprint:
                return key
        return None


class UserDocument(Document):
    email: Indexed(str, unique=True)  # 중복 방지 인덱스
    password_hash: str = Field(repr=False)
    biometric_keys: List[BiometricKey] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "users"  # 컬렉션명
        indexes = [
            # 배열 필드 unique 인덱스는 "다른 문서 사이"의 중복만 막는다.
            # 생체키가 없는 사용자끼리 충돌하지 않도록 partial 인덱스로 만든다.
            IndexModel(
                [("biometric_keys.fingerprint", ASCENDING)],
                name="biometric_fingerprint_unique",
                unique=True,
                partialFilterExpression={"biometric_keys.fingerprint": {"$exists": True}},
            ),
        ]

    @before_event(Insert)
    def set_created_timestamps(self):
        now = utc_now()
        self.created_at = now
        self.updated_at = now

    # 주니어 개발자님께: find_one(...).update(...) 같은 쿼리 단위 업데이트에는 이 훅이 돌지 않습니다.
    # 그래서 UserRepository.append_biometric_key 는 updated_at 을 직접 Set 합니다.
    @before_event(Replace, Update, SaveChanges)
    def touch_updated_at(self):
        self.updated_at = utc_now()

    def to_domain(self) -> User:
        return User(
            id=str(self.id),
            email=self.email,
            password_hash=self.password_hash,
            biometric_keys=list(self.biometric_keys),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
