# 커스텀 예외 클래스 정의
# 주니어 개발자님께: 서비스 레이어는 아래 IdentityError 계열 예외만 밖으로 던집니다.
# 저장소(MongoDB)나 해시 라이브러리에서 올라온 예외는 모두 여기 정의된 종류로 바꿔서,
# API 레이어가 내부 에러 메시지를 사용자에게 그대로 노출하지 않도록 합니다.

from enum import Enum


class ErrorKind(str, Enum):
    """서비스가 돌려줄 수 있는 실패 종류 (닫힌 집합)"""
    INVALID_INPUT = "invalid_input"
    DUPLICATE_EMAIL = "duplicate_email"
    DUPLICATE_BIOMETRIC_KEY = "duplicate_biometric_key"
    INVALID_CREDENTIALS = "invalid_credentials"
    STORE_UNAVAILABLE = "store_unavailable"
    TIMEOUT = "timeout"


class IdentityError(Exception):
    """인증/가입 관련 기본 예외 클래스

    Attributes:
        kind: 실패 종류 (ErrorKind)
        message: 사용자에게 보여도 안전한 메시지
    """
    kind: ErrorKind

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInput(IdentityError):
    """저장소 조회 전에 걸러지는 입력 형식 오류 (빈 비밀번호, 잘못된 이메일 등)

    Attributes:
        field_name: 검증 실패한 필드 이름
    """
    kind = ErrorKind.INVALID_INPUT

    def __init__(self, field_name: str, message: str):
        self.field_name = field_name
        super().__init__(f"[{field_name}] {message}")


class DuplicateEmail(IdentityError):
    kind = ErrorKind.DUPLICATE_EMAIL

    def __init__(self, message: str = "Email already registered"):
        super().__init__(message)


class DuplicateBiometricKey(IdentityError):
    kind = ErrorKind.DUPLICATE_BIOMETRIC_KEY

    def __init__(self, message: str = "Biometric key already registered"):
        super().__init__(message)


class InvalidCredentials(IdentityError):
    """사용자 없음 / 비밀번호 틀림을 구분하지 않는 단일 실패

    주니어 개발자님께: "없는 이메일"과 "틀린 비밀번호"를 다르게 알려주면
    공격자가 가입된 이메일 목록을 알아낼 수 있습니다. 항상 이 예외 하나만 씁니다.
    """
    kind = ErrorKind.INVALID_CREDENTIALS

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class StoreUnavailable(IdentityError):
    """저장소 일시 장애. 재시도 여부는 호출자가 결정합니다."""
    kind = ErrorKind.STORE_UNAVAILABLE

    def __init__(self, message: str = "Credential store unavailable"):
        super().__init__(message)


class OperationTimeout(IdentityError):
    """저장소 호출이나 해시 계산이 제한 시간을 넘긴 경우

    Attributes:
        operation: 타임아웃 난 작업 이름 (예: "find_by_email")
    """
    kind = ErrorKind.TIMEOUT

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Operation timed out: {operation}")


class UniqueConstraintError(Exception):
    """저장소의 unique 인덱스가 쓰기를 거절했을 때 저장소 레이어가 던지는 예외

    서비스 레이어가 field 값을 보고 DuplicateEmail / DuplicateBiometricKey 로 바꿉니다.

    Attributes:
        field: 충돌한 필드 ("email" 또는 "biometric_fingerprint")
    """
    EMAIL = "email"
    BIOMETRIC_FINGERPRINT = "biometric_fingerprint"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"unique constraint violated: {field}")


class ConfigurationError(Exception):
    """서명키 누락 등 시작 시점의 치명적인 설정 오류 (요청 단위 에러가 아님)"""
    pass
