# 저장소/해시 호출 보호 유틸리티
# 주니어 개발자님께: 저장소 호출과 해시 계산은 이 서비스에서 "기다리는" 유일한 지점입니다.
# 둘 다 타임아웃을 걸고, 밖으로 나가는 예외를 IdentityError 계열로 정리합니다.
# 자동 재시도는 하지 않습니다. 재시도 여부는 호출자(API 클라이언트)가 결정합니다.

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from .exceptions import IdentityError, InvalidInput, OperationTimeout, StoreUnavailable, UniqueConstraintError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def call_store(awaitable: Awaitable[T], timeout: float, operation: str) -> T:
    """저장소 호출에 타임아웃을 걸고 예외를 정리합니다.

    - 제한 시간 초과 -> OperationTimeout
    - IdentityError / UniqueConstraintError -> 그대로 전달 (서비스가 처리)
    - 그 밖의 모든 예외 -> StoreUnavailable (원본은 로그에만 남김)
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"[Store] {operation} timed out after {timeout}s")
        raise OperationTimeout(operation) from None
    except (IdentityError, UniqueConstraintError):
        raise
    except Exception as e:
        logger.error(f"[Store] {operation} failed: {e}", exc_info=True)
        raise StoreUnavailable() from e


async def run_hashing(func: Callable[..., T], *args, timeout: float, operation: str) -> T:
    """CPU를 오래 쓰는 해시 계산을 스레드에서 돌려 이벤트 루프를 막지 않게 합니다."""
    try:
        return await asyncio.wait_for(asyncio.to_thread(func, *args), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"[Hashing] {operation} timed out after {timeout}s")
        raise OperationTimeout(operation) from None
    except ValueError as e:
        # passlib 의 PasswordSizeError, 인코딩 실패(UnicodeEncodeError) 모두 ValueError 계열
        logger.info(f"[Hashing] {operation} rejected input: {type(e).__name__}")
        raise InvalidInput("credential", "Credential could not be hashed") from None
