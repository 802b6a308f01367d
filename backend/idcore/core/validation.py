# 입력 형식 검증
# - 저장소를 조회하기 전에 끝나는 로컬 검사만 한다
# - 실패하면 InvalidInput

from email_validator import EmailNotValidError, validate_email
from passlib.utils import MAX_PASSWORD_SIZE

from .exceptions import InvalidInput


def is_acceptable_secret(secret: str) -> bool:
    """해시/지문 계산에 넣을 수 있는 비밀값인지 확인합니다.

    주니어 개발자님께: passlib 은 MAX_PASSWORD_SIZE 를 넘는 값에 PasswordSizeError 를,
    짝이 없는 surrogate 문자("\\ud800")는 UTF-8 인코딩 단계에서 UnicodeEncodeError 를 냅니다.
    둘 다 해시 라이브러리까지 가기 전에 여기서 걸러냅니다.
    """
    if not secret:
        return False
    try:
        encoded = secret.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return len(secret) <= MAX_PASSWORD_SIZE and len(encoded) <= MAX_PASSWORD_SIZE


def validate_email_address(email: str) -> str:
    if not email:
        raise InvalidInput("email", "Email is required")
    try:
        email.encode("utf-8")
        # DNS 조회 없이 문법만 검사. 정규화된 값은 쓰지 않고 입력 그대로 저장한다.
        validate_email(email, check_deliverability=False)
    except UnicodeEncodeError:
        raise InvalidInput("email", "Email must be valid UTF-8 text") from None
    except EmailNotValidError as e:
        raise InvalidInput("email", str(e)) from None
    return email


def validate_password(password: str) -> str:
    if not password:
        raise InvalidInput("password", "Password must not be empty")
    if not is_acceptable_secret(password):
        raise InvalidInput("password", f"Password must be valid UTF-8 text of at most {MAX_PASSWORD_SIZE} bytes")
    return password


def validate_biometric_key(biometric_key: str) -> str:
    if not biometric_key:
        raise InvalidInput("biometric_key", "Biometric key must not be empty")
    if not is_acceptable_secret(biometric_key):
        raise InvalidInput(
            "biometric_key", f"Biometric key must be valid UTF-8 text of at most {MAX_PASSWORD_SIZE} bytes"
        )
    return biometric_key
