# FastAPI 진입점
# - 설정 로드 및 로깅 설정
# - 저장소 초기화 (Beanie/MongoDB 또는 메모리)
# - 해시/지문/토큰 구성요소를 한 번 만들어 app.state 에 보관
# - 라우터 등록, CORS 설정

import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie

from .core.config import get_settings
from .core.exceptions import IdentityError
from .core.security import BiometricFingerprinter, CredentialHasher, TokenIssuer
from .models.user import UserDocument
from .repositories.memory import InMemoryUserRepository
from .repositories.user_repository import UserRepository
from .api.errors import identity_error_handler
from .api.v1.auth import router as auth_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# FastAPI 애플리케이션 인스턴스 생성
app = FastAPI(
    title="Identity Core API",
    description="비밀번호/생체키 가입 및 로그인, JWT 액세스 토큰 발급",
    version="1.0.0"
)

# CORS 허용 도메인 세팅
origins = [o.strip() for o in settings.CORS_ALLOW_ORIGINS.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(IdentityError, identity_error_handler)


async def init_store():
    if settings.STORE_BACKEND == "memory":
        logger.warning("[Startup] 메모리 저장소 사용 중 - 프로세스가 끝나면 데이터가 사라집니다.")
        return InMemoryUserRepository()

    try:
        # 주니어 개발자님께: serverSelectionTimeoutMS는 서버 선택 타임아웃(밀리초)입니다.
        client = AsyncIOMotorClient(settings.MONGODB_URI, serverSelectionTimeoutMS=5000)
        await client.admin.command('ping')
        db = client.get_default_database()
        await init_beanie(database=db, document_models=[UserDocument])
        logger.info("[Startup] MongoDB 연결 성공")
    except Exception as e:
        # 연결 실패해도 서버는 시작된다. 저장소 호출은 요청마다 StoreUnavailable(503)로 응답한다.
        logger.warning(f"[Startup] MongoDB 연결 실패: {e}")
    return UserRepository()


# 앱 시작 시 1회. 서명키/지문키 설정 오류(ConfigurationError)는 시작 자체를 실패시킨다.
@app.on_event("startup")
async def app_init():
    app.state.hasher = CredentialHasher(rounds=settings.BCRYPT_ROUNDS)
    app.state.fingerprinter = BiometricFingerprinter(settings.BIOMETRIC_FINGERPRINT_KEY)
    app.state.token_issuer = TokenIssuer(
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        expires_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )
    app.state.store = await init_store()
    logger.info(f"[Startup] {settings.APP_NAME} ready (env={settings.ENV}, store={settings.STORE_BACKEND})")


# 간단한 헬스체크
@app.get("/")
async def root():
    return {"ok": True, "app": settings.APP_NAME, "time": datetime.now(tz=timezone.utc).isoformat()}


@app.get("/health")
async def health_check():
    return {"status": "ok", "app": settings.APP_NAME, "version": "1.0.0"}


# API v1 라우터 등록
app.include_router(auth_router, prefix="/api/v1")


# 로컬 실행: python -m idcore.main (backend 디렉토리에서)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
