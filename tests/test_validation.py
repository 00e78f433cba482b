"""Unit tests for the shape checks and the error collector."""

import pytest

from vetclinic.errors import ValidationError
from vetclinic.services.request_service import normalize_service_ids
from vetclinic.utils.validation import (
    MAX_INTEGER, ValidationResult, is_date, is_identifier, is_integer, is_number, is_time, parse_time,
    to_int, validate_email, validate_fio, validate_password, validate_phone
)


class TestPredicates:
    @pytest.mark.parametrize('phone', ['+79991234567', '89991234567', '79991234567',
                                       '+7(999)123-45-67', '8 999 123 45 67'])
    def test_valid_phones(self, phone):
        assert validate_phone(phone)

    @pytest.mark.parametrize('phone', ['12345', '+1 555 123 4567', '', None, 79991234567])
    def test_invalid_phones(self, phone):
        assert not validate_phone(phone)

    def test_email(self):
        assert validate_email('a@x.com')
        assert validate_email('first.last@clinic.ru')
        assert not validate_email('a@x')
        assert not validate_email('no-at-sign.com')
        assert not validate_email(None)

    def test_password_length(self):
        assert validate_password('123456')
        assert not validate_password('12345')

    def test_fio_needs_two_tokens(self):
        assert validate_fio('Иванов Иван')
        assert validate_fio('Иванов Иван Иванович')
        assert not validate_fio('Иванов')
        assert not validate_fio('   ')

    def test_numbers_and_identifiers(self):
        assert is_number(5) and is_number('4.5') and is_number(0)
        assert not is_number(True)
        assert not is_number('abc')
        assert is_identifier(3) and is_identifier('3')
        assert not is_identifier(0)
        assert not is_identifier(-1)
        assert not is_identifier('1.5')
        assert not is_identifier(None)

    @pytest.mark.parametrize('value', ['inf', '-inf', 'nan', 'Infinity', '1e400', float('inf'), float('nan')])
    def test_non_finite_values_are_not_numbers(self, value):
        assert not is_number(value)
        assert not is_integer(value)

    def test_integer_bounds(self):
        assert is_integer('5') and is_integer('5.0') and is_integer(MAX_INTEGER)
        assert not is_integer('5.5')
        assert not is_integer(MAX_INTEGER + 1)
        assert not is_integer(10 ** 400)

    @pytest.mark.parametrize('value', ['²', '١٢', 10 ** 20, str(10 ** 20), MAX_INTEGER + 1])
    def test_identifiers_outside_column_range_or_non_ascii(self, value):
        assert not is_identifier(value)

    def test_large_identifier_converts_exactly(self):
        assert is_identifier(str(MAX_INTEGER))
        assert to_int(str(MAX_INTEGER)) == MAX_INTEGER
        assert to_int('7.0') == 7

    def test_dates_and_times(self):
        assert is_date('2024-02-29')
        assert not is_date('2023-02-29')
        assert not is_date('29.02.2024')
        assert is_time('9:30') and is_time('09:30') and is_time('23:59:59')
        assert not is_time('24:00')
        assert not is_time('9.30')
        assert parse_time('09:30').strftime('%H:%M:%S') == '09:30:00'


class TestValidationResult:
    def test_collects_every_violation(self):
        result = ValidationResult()
        result.check(False, 'first')
        result.check(True, 'skipped')
        result.check(False, 'second')

        with pytest.raises(ValidationError) as exc_info:
            result.raise_if_invalid()
        assert exc_info.value.errors == ['first', 'second']
        assert exc_info.value.status_code == 400

    def test_single_violation_becomes_the_message(self):
        result = ValidationResult()
        result.add_error('only one')
        with pytest.raises(ValidationError) as exc_info:
            result.raise_if_invalid()
        assert exc_info.value.message == 'only one'

    def test_valid_result_does_not_raise(self):
        result = ValidationResult()
        result.raise_if_invalid()
        assert result.is_valid


class TestNormalizeServiceIds:
    @pytest.mark.parametrize('value, expected', [
        (5, [5]),
        ('5', [5]),
        ([5], [5]),
        ([5, 7], [5, 7]),
        ([7, 5, 7], [7, 5]),
    ])
    def test_accepts_scalar_and_lists(self, value, expected):
        assert normalize_service_ids(value) == expected

    @pytest.mark.parametrize('value', [None, [], ()])
    def test_empty_selection_fails(self, value):
        with pytest.raises(ValidationError):
            normalize_service_ids(value)

    def test_reports_all_malformed_ids(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_service_ids([1, 'x', -2])
        assert len(exc_info.value.errors) == 2

    def test_unicode_and_oversized_ids_are_malformed(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_service_ids(['²', 10 ** 20, '3'])
        assert len(exc_info.value.errors) == 2
