# 요청/응답 스키마 정의 (Pydantic 모델)
# 주니어 개발자님께: 이메일 형식 검사는 서비스 레이어에서 합니다.
# 여기서 EmailStr 을 쓰면 도메인 부분이 소문자로 바뀌어 저장되므로 일부러 str 로 받습니다.

from pydantic import BaseModel


class UserCreate(BaseModel):
    email: str
    password: str


class BiometricUserCreate(UserCreate):
    biometric_key: str


class UserLogin(BaseModel):
    email: str
    password: str


class BiometricLogin(BaseModel):
    biometric_key: str


class BiometricEnroll(BaseModel):
    biometric_key: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class UserPublic(BaseModel):
    # 해시 값은 절대 응답에 포함하지 않는다
    id: str
    email: str
    biometric_key_count: int = 0
