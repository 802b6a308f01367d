# 테스트 공통 설정
# - 필수 환경변수를 앱 import 전에 채워 둔다
# - bcrypt 비용을 최소(4)로 낮춰 테스트 속도 확보
# - 저장소는 메모리 저장소 사용 (MongoDB 불필요)

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-enough-length-0123456789")
os.environ.setdefault("BIOMETRIC_FINGERPRINT_KEY", "test-fingerprint-key")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest

from idcore.core.security import BiometricFingerprinter, CredentialHasher, TokenIssuer
from idcore.repositories.memory import InMemoryUserRepository
from idcore.services.auth_service import AuthService
from idcore.services.registration_service import RegistrationService

TEST_SECRET = os.environ["JWT_SECRET_KEY"]


@pytest.fixture
def hasher():
    return CredentialHasher(rounds=4)


@pytest.fixture
def fingerprinter():
    return BiometricFingerprinter("test-fingerprint-key")


@pytest.fixture
def token_issuer():
    return TokenIssuer(TEST_SECRET, algorithm="HS256", expires_minutes=30)


@pytest.fixture
def store():
    return InMemoryUserRepository()


@pytest.fixture
def registration(store, hasher, fingerprinter):
    return RegistrationService(store, hasher, fingerprinter)


@pytest.fixture
def auth(store, hasher, fingerprinter, token_issuer):
    return AuthService(store, hasher, fingerprinter, token_issuer)
