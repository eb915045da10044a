# ================================================================================
# Response Validator
# ================================================================================
#
# Assertions on Treveler API responses, in two layers:
#
#   - HTTP-level checks (status code, content type, response time, body,
#     headers, JSON paths) that raise ResponseValidationError on mismatch
#   - Rule-based field validation (ValidationRule lists) with an Allure
#     summary of every rule
#
# JSON path expressions are evaluated with jsonpath-ng; "data.id" and
# "$.data.id" are equivalent.
#
# ================================================================================

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Collection, Dict, List, Union

import allure
import httpx
from jsonpath_ng import parse as jsonpath_parse
from jsonpath_ng.exceptions import JSONPathError
from loguru import logger


class ResponseValidationError(AssertionError):
    """Raised when a response does not meet an expectation."""
    pass


# ================================================================================
# HTTP-level checks
# ================================================================================

def response_time_ms(response: httpx.Response) -> float:
    """Elapsed time of a completed exchange in milliseconds."""
    return response.elapsed.total_seconds() * 1000


def validate_status_code(
    response: httpx.Response,
    expected: Union[int, Collection[int]],
) -> None:
    """
    Check the status code.

    Args:
        response: Completed response
        expected: One status code, or a collection of accepted codes
    """
    accepted = {expected} if isinstance(expected, int) else set(expected)
    actual = response.status_code
    logger.info(f"Validating status code. Expected: {sorted(accepted)}, Actual: {actual}")
    if actual not in accepted:
        raise ResponseValidationError(
            f"Status code mismatch. Expected: {' or '.join(map(str, sorted(accepted)))}, "
            f"Actual: {actual}"
        )


def validate_content_type(response: httpx.Response, expected: str) -> None:
    """Check that the Content-Type header contains ``expected``."""
    actual = response.headers.get("content-type")
    logger.info(f"Validating content type. Expected: {expected}, Actual: {actual}")
    if not actual or expected not in actual:
        raise ResponseValidationError(
            f"Content type mismatch. Expected: {expected}, Actual: {actual}"
        )


def validate_response_time(response: httpx.Response, max_response_time_ms: float) -> None:
    """
    Check the elapsed time against a budget.

    This runs after the exchange: a slow call is reported, not aborted.
    """
    actual = response_time_ms(response)
    logger.info(
        f"Validating response time. Expected max: {max_response_time_ms}ms, "
        f"Actual: {actual:.0f}ms"
    )
    if actual > max_response_time_ms:
        raise ResponseValidationError(
            f"Response time exceeds maximum. Expected max: {max_response_time_ms}ms, "
            f"Actual: {actual:.0f}ms"
        )


def validate_response_body_not_empty(response: httpx.Response) -> None:
    logger.info("Validating response body is not empty")
    if not response.content:
        raise ResponseValidationError("Response body should not be empty")


def validate_response_body_empty(response: httpx.Response) -> None:
    logger.info("Validating response body is empty")
    if response.content:
        raise ResponseValidationError("Response body should be empty")


def validate_header(response: httpx.Response, header_name: str, expected_value: str) -> None:
    actual = response.headers.get(header_name)
    logger.info(f"Validating header {header_name}. Expected: {expected_value}, Actual: {actual}")
    if actual != expected_value:
        raise ResponseValidationError(
            f"Header {header_name} mismatch. Expected: {expected_value}, Actual: {actual}"
        )


def validate_response(
    response: httpx.Response,
    expected_status_code: Union[int, Collection[int]],
    expected_content_type: str,
    max_response_time_ms: float,
    body_empty: bool = False,
) -> None:
    """Status, content type, time budget and body presence in one call."""
    validate_status_code(response, expected_status_code)
    validate_content_type(response, expected_content_type)
    validate_response_time(response, max_response_time_ms)
    if body_empty:
        validate_response_body_empty(response)
    else:
        validate_response_body_not_empty(response)


def validate_response_contains_text(response: httpx.Response, expected_text: str) -> None:
    logger.info(f"Validating response contains text: {expected_text}")
    if expected_text not in response.text:
        raise ResponseValidationError(f"Response should contain text: {expected_text}")


# ================================================================================
# JSON path checks
# ================================================================================

def find_json_path(data: Any, expression: str) -> List[Any]:
    """
    All values matching a JSON path expression.

    Raises:
        ResponseValidationError: If the expression cannot be parsed
    """
    if not expression.startswith("$"):
        expression = f"$.{expression}" if not expression.startswith("[") else f"${expression}"
    try:
        return [match.value for match in jsonpath_parse(expression).find(data)]
    except JSONPathError as e:
        raise ResponseValidationError(f"Invalid JSON path '{expression}': {e}") from e


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise ResponseValidationError(f"Response body is not valid JSON: {e}") from e


def _first_match(response: httpx.Response, json_path: str) -> Any:
    matches = find_json_path(_json_body(response), json_path)
    return matches[0] if matches else None


def validate_json_path_value(response: httpx.Response, json_path: str, expected_value: Any) -> None:
    actual = _first_match(response, json_path)
    logger.info(f"Validating JSON path {json_path}. Expected: {expected_value}, Actual: {actual}")
    if actual != expected_value:
        raise ResponseValidationError(
            f"JSON path {json_path} mismatch. Expected: {expected_value}, Actual: {actual}"
        )


def validate_json_path_exists(response: httpx.Response, json_path: str) -> None:
    logger.info(f"Validating JSON path exists: {json_path}")
    if not find_json_path(_json_body(response), json_path):
        raise ResponseValidationError(f"JSON path {json_path} should exist")


def validate_json_path_not_null(response: httpx.Response, json_path: str) -> None:
    logger.info(f"Validating JSON path is not null: {json_path}")
    if _first_match(response, json_path) is None:
        raise ResponseValidationError(f"JSON path {json_path} should not be null")


def validate_json_path_not_empty(response: httpx.Response, json_path: str) -> None:
    value = _first_match(response, json_path)
    logger.info(f"Validating JSON path is not empty: {json_path}")
    if value is None:
        raise ResponseValidationError(f"JSON path {json_path} should not be null")
    if isinstance(value, (str, list, dict)) and len(value) == 0:
        raise ResponseValidationError(f"JSON path {json_path} should not be empty")


def validate_array_size(response: httpx.Response, json_path: str, expected_size: int) -> None:
    value = _first_match(response, json_path)
    if not isinstance(value, list):
        raise ResponseValidationError(f"JSON path {json_path} is not an array: {value!r}")
    logger.info(
        f"Validating array size for path {json_path}. "
        f"Expected: {expected_size}, Actual: {len(value)}"
    )
    if len(value) != expected_size:
        raise ResponseValidationError(
            f"Array size mismatch for path {json_path}. "
            f"Expected: {expected_size}, Actual: {len(value)}"
        )


# ================================================================================
# Rule-based field validation
# ================================================================================

class ValidationType(Enum):
    """Supported field validation types."""
    EQUAL = "equal"
    NOT_EQUAL = "not_equal"
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"
    NOT_EMPTY = "not_empty"
    CONTAINS = "contains"
    REGEX_MATCH = "regex_match"
    LENGTH_EQUAL = "length_equal"
    LENGTH_GREATER_THAN = "length_greater_than"
    TYPE_CHECK = "type_check"
    RANGE = "range"
    IN_LIST = "in_list"


@dataclass
class ValidationRule:
    """
    One expectation on a response field.

    Attributes:
        field: Dot path ("user.email", "items[0].id") or JSON path ("$..id")
        validation_type: The type of validation to perform
        expected: The expected value or pattern
        description: Human-readable description of the validation
        required: Whether the field must exist
    """
    field: str
    validation_type: ValidationType
    expected: Any = None
    description: str = ""
    required: bool = True


@dataclass
class ValidationResult:
    """Outcome of one ValidationRule."""
    passed: bool
    rule: ValidationRule
    actual_value: Any = None
    error_message: str = ""


_TYPE_MAP = {
    "string": str,
    "int": int,
    "integer": int,
    "number": (int, float),
    "bool": bool,
    "boolean": bool,
    "array": list,
    "list": list,
    "object": dict,
    "dict": dict,
    "null": type(None),
}


class ResponseValidator:
    """
    Validate a decoded JSON body against a list of ValidationRule.

    Example:
        validator = ResponseValidator()
        rules = [
            ValidationRule(
                field="id",
                validation_type=ValidationType.IS_NOT_NULL,
                description="Hotel id is returned"
            ),
            ValidationRule(
                field="type",
                validation_type=ValidationType.IN_LIST,
                expected=["open", "closed"],
            ),
        ]
        validator.validate_and_assert(response.json(), rules)
    """

    def __init__(self):
        self._validation_handlers = {
            ValidationType.EQUAL: self._validate_equal,
            ValidationType.NOT_EQUAL: self._validate_not_equal,
            ValidationType.IS_NULL: self._validate_is_null,
            ValidationType.IS_NOT_NULL: self._validate_is_not_null,
            ValidationType.NOT_EMPTY: self._validate_not_empty,
            ValidationType.CONTAINS: self._validate_contains,
            ValidationType.REGEX_MATCH: self._validate_regex_match,
            ValidationType.LENGTH_EQUAL: self._validate_length_equal,
            ValidationType.LENGTH_GREATER_THAN: self._validate_length_greater_than,
            ValidationType.TYPE_CHECK: self._validate_type_check,
            ValidationType.RANGE: self._validate_range,
            ValidationType.IN_LIST: self._validate_in_list,
        }

    def validate(
        self,
        response_data: Union[Dict[str, Any], List[Any]],
        rules: List[ValidationRule]
    ) -> List[ValidationResult]:
        """
        Apply every rule and attach a summary to Allure.

        Returns:
            One ValidationResult per rule, in rule order
        """
        results = []
        with allure.step(f"Validating response against {len(rules)} rules"):
            for rule in rules:
                result = self._apply_rule(response_data, rule)
                results.append(result)

                status_icon = "✅" if result.passed else "❌"
                log_msg = f"{status_icon} {rule.description or rule.field}: {result.passed}"
                if result.passed:
                    logger.debug(log_msg)
                else:
                    logger.warning(f"{log_msg} - {result.error_message}")

            self._attach_validation_summary(results)
        return results

    def validate_and_assert(
        self,
        response_data: Union[Dict[str, Any], List[Any]],
        rules: List[ValidationRule],
    ) -> None:
        """
        Validate and raise if any rule fails.

        Raises:
            ResponseValidationError: Listing every failed rule
        """
        results = self.validate(response_data, rules)
        failures = [r for r in results if not r.passed]

        if failures:
            error_text = "\n".join(
                f"- {f.rule.field}: {f.error_message}" for f in failures
            )
            raise ResponseValidationError(
                f"Response validation failed ({len(failures)}/{len(results)} rules):\n"
                f"{error_text}"
            )

    def _apply_rule(self, response_data: Any, rule: ValidationRule) -> ValidationResult:
        try:
            actual_value = self._get_nested_value(response_data, rule.field)
        except (KeyError, IndexError, TypeError):
            if rule.required:
                return ValidationResult(
                    passed=False,
                    rule=rule,
                    error_message=f"Required field not found: {rule.field}"
                )
            return ValidationResult(
                passed=True,
                rule=rule,
                error_message=f"Optional field not found: {rule.field}"
            )

        handler = self._validation_handlers[rule.validation_type]
        try:
            passed, error_message = handler(actual_value, rule.expected)
        except (TypeError, ValueError) as e:
            passed, error_message = False, f"Validation error: {e}"

        return ValidationResult(
            passed=passed,
            rule=rule,
            actual_value=actual_value,
            error_message=error_message
        )

    def _get_nested_value(self, data: Any, key_path: str) -> Any:
        """
        Resolve a dot path ("results.items[0].id") or a JSON path ("$..id").

        Raises:
            KeyError: If the path doesn't exist
        """
        if key_path.startswith("$"):
            matches = find_json_path(data, key_path)
            if not matches:
                raise KeyError(key_path)
            return matches[0]

        current = data
        for key in key_path.split("."):
            array_match = re.match(r"(\w*)\[(\d+)\]$", key)
            if array_match:
                field_name, index = array_match.group(1), int(array_match.group(2))
                if field_name:
                    current = current[field_name]
                current = current[index]
            else:
                current = current[key]
        return current

    def _validate_equal(self, actual: Any, expected: Any) -> tuple:
        passed = actual == expected
        return passed, "" if passed else f"Expected '{expected}', got '{actual}'"

    def _validate_not_equal(self, actual: Any, expected: Any) -> tuple:
        passed = actual != expected
        return passed, "" if passed else f"Expected not equal to '{expected}'"

    def _validate_is_null(self, actual: Any, expected: Any) -> tuple:
        passed = actual is None
        return passed, "" if passed else f"Expected null, got '{actual}'"

    def _validate_is_not_null(self, actual: Any, expected: Any) -> tuple:
        passed = actual is not None
        return passed, "" if passed else "Expected non-null value, got null"

    def _validate_not_empty(self, actual: Any, expected: Any) -> tuple:
        passed = actual is not None and actual != "" and actual != [] and actual != {}
        return passed, "" if passed else f"Expected non-empty value, got '{actual}'"

    def _validate_contains(self, actual: Any, expected: Any) -> tuple:
        passed = expected in actual if isinstance(actual, (list, dict)) else str(expected) in str(actual)
        return passed, "" if passed else f"'{actual}' does not contain '{expected}'"

    def _validate_regex_match(self, actual: Any, expected: str) -> tuple:
        try:
            passed = re.match(expected, str(actual)) is not None
        except re.error as e:
            return False, f"Invalid regex pattern: {e}"
        return passed, "" if passed else f"'{actual}' does not match pattern '{expected}'"

    def _validate_length_equal(self, actual: Any, expected: int) -> tuple:
        actual_len = len(actual)
        passed = actual_len == expected
        return passed, "" if passed else f"Expected length {expected}, got {actual_len}"

    def _validate_length_greater_than(self, actual: Any, expected: int) -> tuple:
        actual_len = len(actual)
        passed = actual_len > expected
        return passed, "" if passed else f"Expected length > {expected}, got {actual_len}"

    def _validate_type_check(self, actual: Any, expected: str) -> tuple:
        expected_type = _TYPE_MAP.get(expected.lower())
        if expected_type is None:
            return False, f"Unknown type: {expected}"
        # bool is an int subclass; keep "integer" strict
        if expected_type in (int, (int, float)) and isinstance(actual, bool):
            return False, f"Expected type {expected}, got bool"
        passed = isinstance(actual, expected_type)
        return passed, "" if passed else f"Expected type {expected}, got {type(actual).__name__}"

    def _validate_range(self, actual: Any, expected: Dict) -> tuple:
        min_val = expected.get("min")
        max_val = expected.get("max")
        if min_val is not None and actual < min_val:
            return False, f"Value {actual} is less than minimum {min_val}"
        if max_val is not None and actual > max_val:
            return False, f"Value {actual} is greater than maximum {max_val}"
        return True, ""

    def _validate_in_list(self, actual: Any, expected: List) -> tuple:
        passed = actual in expected
        return passed, "" if passed else f"'{actual}' not in {expected}"

    def _attach_validation_summary(self, results: List[ValidationResult]) -> None:
        passed_count = sum(1 for r in results if r.passed)

        summary_lines = [
            f"Total Rules: {len(results)}",
            f"Passed: {passed_count}",
            f"Failed: {len(results) - passed_count}",
            "",
            "Details:",
            "-" * 40
        ]
        for result in results:
            status = "✅ PASS" if result.passed else "❌ FAIL"
            line = f"{status} | {result.rule.field}"
            if not result.passed:
                line += f" | {result.error_message}"
            summary_lines.append(line)

        allure.attach(
            "\n".join(summary_lines),
            name="Validation Summary",
            attachment_type=allure.attachment_type.TEXT
        )


__all__ = [
    "ResponseValidationError",
    "ResponseValidator",
    "ValidationResult",
    "ValidationRule",
    "ValidationType",
    "find_json_path",
    "response_time_ms",
    "validate_array_size",
    "validate_content_type",
    "validate_header",
    "validate_json_path_exists",
    "validate_json_path_not_empty",
    "validate_json_path_not_null",
    "validate_json_path_value",
    "validate_response",
    "validate_response_body_empty",
    "validate_response_body_not_empty",
    "validate_response_contains_text",
    "validate_response_time",
    "validate_status_code",
]
