"""Shape checks shared by every service, plus an error collector.

Services run all checks for one input, collect every violation in a
``ValidationResult`` and only then raise, so the caller sees the whole list
instead of the first failure.
"""
import logging
import math
import re
from datetime import datetime

from dateutil.parser import isoparse, parse as parse_datetime

from vetclinic.errors import ValidationError

logger = logging.getLogger(__name__)

EMAIL_REGEX = re.compile(
    r'^(([^<>()\[\].,;:\s@"]+(\.[^<>()\[\].,;:\s@"]+)*)|(".+"))'
    r'@(([^<>()\[\].,;:\s@"]+\.)+[^<>()\[\].,;:\s@"]{2,})$',
    re.IGNORECASE | re.UNICODE
)
PHONE_REGEX = re.compile(
    r'^((\+7|7|8)+([0-9]){10})$'
    r'|^((\+7|7|8)+(\s|\()([0-9]){3}(\s|\))([0-9]){3}(\s|-)?([0-9]){2}(\s|-)?([0-9]){2})$'
)
DATE_REGEX = re.compile(r'^\d{4}-\d{2}-\d{2}$')
TIME_REGEX = re.compile(r'^([01]?[0-9]|2[0-3]):[0-5][0-9](:[0-5][0-9])?$')
MIN_PASSWORD_LENGTH = 6
# Upper bound of the Integer columns ids and counters are stored in
MAX_INTEGER = 2 ** 31 - 1


def is_string(value):
    return isinstance(value, str)


def is_empty(value):
    return str(value).strip() == ''


def is_non_empty_string(value):
    return is_string(value) and not is_empty(value)


def is_number(value):
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)) or is_non_empty_string(value):
        try:
            number = float(value)
        except (ValueError, OverflowError):
            return False
        # "inf" and "nan" parse as floats but are not numbers a client can mean
        return math.isfinite(number)
    return False


def is_digits(value):
    return is_string(value) and value.strip().isascii() and value.strip().isdigit()


def is_identifier(value):
    """Positive integer id, given either as a number or as a string of ASCII digits."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return 0 < value <= MAX_INTEGER
    if is_digits(value):
        return 0 < int(value) <= MAX_INTEGER
    return False


def is_integer(value):
    if not is_number(value):
        return False
    number = float(value)
    return number.is_integer() and abs(number) <= MAX_INTEGER


def is_date(value):
    if not is_string(value) or not DATE_REGEX.match(value):
        return False
    try:
        isoparse(value)
    except ValueError:
        return False
    return True


def is_time(value):
    return is_string(value) and TIME_REGEX.match(value) is not None


def validate_email(email):
    return is_string(email) and EMAIL_REGEX.match(email) is not None


def validate_phone(phone):
    return is_string(phone) and PHONE_REGEX.match(phone) is not None


def validate_password(password):
    return is_string(password) and len(password) >= MIN_PASSWORD_LENGTH


def validate_fio(fio):
    return is_non_empty_string(fio) and len(fio.split()) >= 2


def to_int(value):
    if isinstance(value, int) or is_digits(value):
        return int(value)
    return int(float(value))


def to_float(value):
    return float(value)


def parse_date(value):
    return isoparse(value).date()


def parse_time(value):
    return parse_datetime(value, default=datetime(1970, 1, 1)).time()


class ValidationResult:
    """Container for validation results."""

    def __init__(self):
        self.errors = []

    @property
    def is_valid(self):
        return not self.errors

    def add_error(self, message):
        self.errors.append(message)
        logger.debug(f"Validation error: {message}")

    def check(self, condition, message):
        if not condition:
            self.add_error(message)
        return condition

    def raise_if_invalid(self):
        if self.errors:
            raise ValidationError(list(self.errors))

