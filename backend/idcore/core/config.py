# 설정 모듈
# - .env 값들을 한 곳에서 관리
# - 기본값을 제공하여 로컬 실행 편의성 확보
# - 서명키/지문키처럼 반드시 필요한 값은 기본값 없이 required 로 둔다

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# 프로젝트 루트 디렉토리 경로 찾기
# 주니어 개발자님께: 이 파일은 backend/idcore/core/config.py에 있으므로,
# 4단계 상위로 올라가면 프로젝트 루트가 됩니다.
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
ENV_FILE_PATH = PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    APP_NAME: str = "idcore"
    ENV: str = "dev"
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # mongo: Beanie/MongoDB 저장소, memory: 프로세스 내 저장소 (로컬 실행/테스트용)
    STORE_BACKEND: Literal["mongo", "memory"] = "mongo"
    MONGODB_URI: str = "mongodb://localhost:27017/idcore"

    JWT_SECRET_KEY: str = Field(..., description="JWT 토큰 서명에 사용되는 비밀키. 반드시 강력한 랜덤 문자열로 설정하세요.")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # 생체키 조회용 지문(HMAC) 계산에 쓰는 비밀키. 바꾸면 기존 지문으로는 더 이상 조회되지 않습니다.
    BIOMETRIC_FINGERPRINT_KEY: str = Field(..., description="생체키 지문(HMAC-SHA256) 계산용 비밀키")
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)

    # 저장소 호출/해시 계산 타임아웃 (초 단위)
    STORE_TIMEOUT_SECONDS: float = Field(default=5.0, gt=0)
    HASH_TIMEOUT_SECONDS: float = Field(default=5.0, gt=0)

    CORS_ALLOW_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH) if ENV_FILE_PATH.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    # 주니어 개발자님께: 모듈 import 시점이 아니라 처음 필요할 때 한 번만 읽습니다.
    # FastAPI 의존성(Depends)으로도 그대로 쓸 수 있습니다.
    return Settings()
