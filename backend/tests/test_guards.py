# 타임아웃/예외 정리 유틸리티 테스트
import asyncio
import time

import pytest

from idcore.core.exceptions import (
    DuplicateEmail,
    InvalidInput,
    OperationTimeout,
    StoreUnavailable,
    UniqueConstraintError,
)
from idcore.core.guards import call_store, run_hashing


async def _value(v):
    return v


async def _raise(exc):
    raise exc


def test_call_store_returns_value():
    assert asyncio.run(call_store(_value(42), 1.0, "op")) == 42


def test_call_store_timeout():
    with pytest.raises(OperationTimeout) as exc_info:
        asyncio.run(call_store(asyncio.sleep(1), 0.01, "slow_op"))
    assert exc_info.value.operation == "slow_op"


def test_call_store_passes_domain_errors_through():
    with pytest.raises(DuplicateEmail):
        asyncio.run(call_store(_raise(DuplicateEmail()), 1.0, "op"))
    with pytest.raises(UniqueConstraintError):
        asyncio.run(call_store(_raise(UniqueConstraintError("email")), 1.0, "op"))


def test_call_store_wraps_unknown_errors():
    with pytest.raises(StoreUnavailable) as exc_info:
        asyncio.run(call_store(_raise(OSError("connection refused")), 1.0, "op"))
    assert isinstance(exc_info.value.__cause__, OSError)


def test_run_hashing_returns_value():
    assert asyncio.run(run_hashing(len, "abc", timeout=1.0, operation="len")) == 3


def test_run_hashing_timeout():
    with pytest.raises(OperationTimeout):
        asyncio.run(run_hashing(time.sleep, 0.5, timeout=0.01, operation="sleep"))


def test_run_hashing_translates_value_error():
    def reject(secret):
        secret.encode("utf-8")

    with pytest.raises(InvalidInput):
        asyncio.run(run_hashing(reject, "\ud800", timeout=1.0, operation="hash_password"))
