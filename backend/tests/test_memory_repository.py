# 메모리 저장소 unique 제약 테스트
import asyncio

import pytest

from idcore.core.exceptions import UniqueConstraintError
from idcore.models.user import BiometricKey


def _key(fp: str) -> BiometricKey:
    return BiometricKey(key_hash=f"hash-{fp}", fingerprint=fp)


def test_insert_and_lookup(store):
    user = asyncio.run(store.insert("a@x.com", "hash", [_key("fp1")]))
    assert user.id
    assert asyncio.run(store.find_by_email("a@x.com")).id == user.id
    assert asyncio.run(store.find_by_biometric_fingerprint("fp1")).id == user.id
    assert asyncio.run(store.get(user.id)).email == "a@x.com"
    assert asyncio.run(store.find_by_email("missing@x.com")) is None
    assert asyncio.run(store.get("missing")) is None


def test_insert_duplicate_email(store):
    asyncio.run(store.insert("a@x.com", "hash", []))
    with pytest.raises(UniqueConstraintError) as exc_info:
        asyncio.run(store.insert("a@x.com", "hash2", []))
    assert exc_info.value.field == UniqueConstraintError.EMAIL


def test_insert_duplicate_fingerprint(store):
    asyncio.run(store.insert("a@x.com", "hash", [_key("fp1")]))
    with pytest.raises(UniqueConstraintError) as exc_info:
        asyncio.run(store.insert("b@x.com", "hash", [_key("fp1")]))
    assert exc_info.value.field == UniqueConstraintError.BIOMETRIC_FINGERPRINT
    assert asyncio.run(store.find_by_email("b@x.com")) is None


def test_users_without_keys_do_not_collide(store):
    asyncio.run(store.insert("a@x.com", "hash", []))
    asyncio.run(store.insert("b@x.com", "hash", []))


def test_append_keeps_order_and_updates_timestamp(store):
    user = asyncio.run(store.insert("a@x.com", "hash", [_key("fp1")]))
    updated = asyncio.run(store.append_biometric_key(user.id, _key("fp2")))
    assert updated.biometric_key_hashes == ["hash-fp1", "hash-fp2"]
    assert updated.updated_at >= user.updated_at
    assert updated.created_at == user.created_at


def test_append_duplicate_fingerprint(store):
    a = asyncio.run(store.insert("a@x.com", "hash", [_key("fp1")]))
    b = asyncio.run(store.insert("b@x.com", "hash", []))
    with pytest.raises(UniqueConstraintError):
        asyncio.run(store.append_biometric_key(b.id, _key("fp1")))
    with pytest.raises(UniqueConstraintError):
        asyncio.run(store.append_biometric_key(a.id, _key("fp1")))


def test_append_to_missing_user(store):
    assert asyncio.run(store.append_biometric_key("missing", _key("fp1"))) is None


def test_returned_records_are_copies(store):
    user = asyncio.run(store.insert("a@x.com", "hash", []))
    user.biometric_keys.append(_key("fp9"))
    assert asyncio.run(store.get(user.id)).biometric_keys == []
    assert asyncio.run(store.find_by_biometric_fingerprint("fp9")) is None
