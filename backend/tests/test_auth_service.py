# 로그인 서비스 테스트 (메모리 저장소 사용)
import asyncio
from unittest.mock import AsyncMock, patch

import jwt
import pytest

from idcore.core.exceptions import InvalidCredentials, OperationTimeout, StoreUnavailable

from conftest import TEST_SECRET


def _subject(token) -> str:
    return jwt.decode(token.access_token, TEST_SECRET, algorithms=["HS256"])["sub"]


def test_password_scenario(registration, auth):
    user = asyncio.run(registration.register_standard("a@x.com", "pw1"))

    token = asyncio.run(auth.login_standard("a@x.com", "pw1"))
    assert _subject(token) == user.id
    assert token.token_type == "bearer"

    with pytest.raises(InvalidCredentials):
        asyncio.run(auth.login_standard("a@x.com", "wrong"))


def test_wrong_password_and_unknown_email_are_indistinguishable(registration, auth):
    asyncio.run(registration.register_standard("a@x.com", "pw1"))

    with pytest.raises(InvalidCredentials) as wrong_pw:
        asyncio.run(auth.login_standard("a@x.com", "wrong"))
    with pytest.raises(InvalidCredentials) as no_user:
        asyncio.run(auth.login_standard("nobody@x.com", "pw1"))

    assert type(wrong_pw.value) is type(no_user.value)
    assert wrong_pw.value.kind == no_user.value.kind
    assert wrong_pw.value.message == no_user.value.message


def test_unknown_email_still_runs_dummy_verify(auth, hasher):
    with patch.object(hasher, "dummy_verify", wraps=hasher.dummy_verify) as dummy:
        with pytest.raises(InvalidCredentials):
            asyncio.run(auth.login_standard("nobody@x.com", "pw1"))
    dummy.assert_called_once()


def test_login_email_is_case_sensitive(registration, auth):
    asyncio.run(registration.register_standard("a@x.com", "pw1"))
    with pytest.raises(InvalidCredentials):
        asyncio.run(auth.login_standard("A@x.com", "pw1"))


def test_empty_password_login_is_invalid_credentials(registration, auth):
    asyncio.run(registration.register_standard("a@x.com", "pw1"))
    with pytest.raises(InvalidCredentials):
        asyncio.run(auth.login_standard("a@x.com", ""))


def test_biometric_scenario(registration, auth):
    user = asyncio.run(registration.register_with_biometric("b@x.com", "pw", "bk1"))

    token = asyncio.run(auth.login_biometric("bk1"))
    assert _subject(token) == user.id

    # 같은 사용자는 비밀번호로도 로그인 가능
    assert _subject(asyncio.run(auth.login_standard("b@x.com", "pw"))) == user.id


def test_biometric_login_with_enrolled_second_key(registration, auth):
    user = asyncio.run(registration.register_with_biometric("b@x.com", "pw", "bk1"))
    asyncio.run(registration.enroll_biometric(user.id, "bk2"))
    assert _subject(asyncio.run(auth.login_biometric("bk2"))) == user.id
    assert _subject(asyncio.run(auth.login_biometric("bk1"))) == user.id


@pytest.mark.parametrize("key", ["never-enrolled", ""])
def test_unknown_biometric_key_is_invalid_credentials(registration, auth, key):
    asyncio.run(registration.register_with_biometric("b@x.com", "pw", "bk1"))
    with pytest.raises(InvalidCredentials):
        asyncio.run(auth.login_biometric(key))


def test_biometric_fingerprint_collision_is_rejected_by_hash(registration, auth, store, fingerprinter):
    # 지문이 같더라도 솔트 해시 검증을 통과하지 못하면 실패해야 한다
    asyncio.run(registration.register_with_biometric("b@x.com", "pw", "bk1"))
    owner = asyncio.run(store.find_by_biometric_fingerprint(fingerprinter.fingerprint("bk1")))

    with patch.object(fingerprinter, "fingerprint", return_value=owner.biometric_keys[0].fingerprint):
        with pytest.raises(InvalidCredentials):
            asyncio.run(auth.login_biometric("forged-key"))


def test_store_failure_during_login_is_store_unavailable(auth, store):
    with patch.object(store, "find_by_email", new=AsyncMock(side_effect=RuntimeError("socket closed"))):
        with pytest.raises(StoreUnavailable):
            asyncio.run(auth.login_standard("a@x.com", "pw"))


def test_slow_store_times_out(store, hasher, fingerprinter, token_issuer):
    from idcore.services.auth_service import AuthService

    async def slow_lookup(email):
        await asyncio.sleep(1)

    service = AuthService(store, hasher, fingerprinter, token_issuer, store_timeout=0.01)
    with patch.object(store, "find_by_email", new=slow_lookup):
        with pytest.raises(OperationTimeout) as exc_info:
            asyncio.run(service.login_standard("a@x.com", "pw"))
    assert exc_info.value.operation == "find_by_email"


@pytest.mark.parametrize("key", ["k" * 5000, "\ud800", "bk1\udfff"])
def test_unhashable_biometric_key_login_is_invalid_credentials(registration, auth, hasher, key):
    asyncio.run(registration.register_with_biometric("b@x.com", "pw", "bk1"))
    with patch.object(hasher, "dummy_verify", wraps=hasher.dummy_verify) as dummy:
        with pytest.raises(InvalidCredentials):
            asyncio.run(auth.login_biometric(key))
    dummy.assert_called_once()


@pytest.mark.parametrize("password", ["p" * 5000, "\ud800"])
def test_unhashable_password_login_is_invalid_credentials(registration, auth, password):
    asyncio.run(registration.register_standard("a@x.com", "pw1"))
    with pytest.raises(InvalidCredentials):
        asyncio.run(auth.login_standard("a@x.com", password))


def test_unencodable_email_login_never_reaches_store(auth, store):
    with patch.object(store, "find_by_email", new=AsyncMock()) as find:
        with pytest.raises(InvalidCredentials):
            asyncio.run(auth.login_standard("a\ud800@x.com", "pw"))
    find.assert_not_called()
