"""
Form validation for transactions and portfolio names.

Rules are plain data: ``(field, predicate, message)`` tuples evaluated in
order. The first failing rule for a field produces that field's error and the
remaining rules for the field are skipped, so later predicates may assume the
earlier ones held.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Iterable, Mapping, NamedTuple, Optional

from portfolio_tracker.core.exceptions import ValidationError
from portfolio_tracker.models.transaction import TransactionType
from portfolio_tracker.utils.date_utils import (
    EARLIEST_TRANSACTION_DATE,
    is_future_date,
    parse_date,
)

NAME_PATTERN = re.compile(r"^[a-zA-Z0-9\s\-_]*$")
COMMENT_PATTERN = re.compile(r"^[a-zA-Z0-9\s.'\"&,!?\-_]*$")

# Persisted (camelCase) names accepted in form input
FIELD_ALIASES = {
    "transactionName": "transaction_name",
    "transactionDate": "transaction_date",
}

TRANSACTION_FIELDS = ("type", "transaction_name", "amount", "transaction_date", "comments")


class Rule(NamedTuple):
    field: str
    predicate: Callable[[Any], bool]
    message: str


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _optional(predicate: Callable[[Any], bool]) -> Callable[[Any], bool]:
    """Wrap a predicate so that missing values pass."""
    return lambda value: not _present(value) or predicate(value)


def _to_decimal(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def _is_number(value: Any) -> bool:
    return _to_decimal(value) is not None


def _is_positive(value: Any) -> bool:
    return _to_decimal(value) > 0


def _has_two_decimals_at_most(value: Any) -> bool:
    exponent = _to_decimal(value).as_tuple().exponent
    return not isinstance(exponent, int) or exponent >= -2


def _is_known_type(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        TransactionType.from_input(value)
    except ValueError:
        return False
    return True


def _is_iso_date(value: Any) -> bool:
    try:
        parse_date(value)
    except (TypeError, ValueError):
        return False
    return True


def _not_in_future(value: Any) -> bool:
    return not is_future_date(parse_date(value))


def _not_before_earliest(value: Any) -> bool:
    return parse_date(value) >= EARLIEST_TRANSACTION_DATE


def _matches(pattern: "re.Pattern[str]") -> Callable[[Any], bool]:
    return lambda value: isinstance(value, str) and bool(pattern.match(value))


TRANSACTION_RULES = [
    Rule("type", _present, "Type is required."),
    Rule("type", _is_known_type, "Type should be either Debit or Credit."),
    Rule("transaction_name", _present, "Name is required."),
    Rule(
        "transaction_name",
        _matches(NAME_PATTERN),
        "Name can only have a-z, A-Z, 0-9, space, -, _.",
    ),
    Rule("amount", _present, "Amount is required."),
    Rule("amount", _is_number, "Amount should be a number."),
    Rule("amount", _is_positive, "Amount should be a positive number."),
    Rule("amount", _has_two_decimals_at_most, "Amount should have only two decimal values."),
    Rule("transaction_date", _present, "Date is required."),
    Rule("transaction_date", _is_iso_date, "Date should be a valid date (YYYY-MM-DD)."),
    Rule("transaction_date", _not_in_future, "Date cannot be in the future."),
    Rule(
        "transaction_date",
        _not_before_earliest,
        f"Date cannot be before {EARLIEST_TRANSACTION_DATE.isoformat()}.",
    ),
    Rule(
        "comments",
        _optional(_matches(COMMENT_PATTERN)),
        "Comments can only have a-z, A-Z, 0-9, space, ., ', \", &, !, ?, -, _.",
    ),
]

PORTFOLIO_NAME_RULES = [
    Rule("name", _present, "Portfolio name is required."),
    Rule("name", _matches(NAME_PATTERN), "Name can only have a-z, A-Z, 0-9, space, -, _."),
]


def evaluate_rules(rules: Iterable[Rule], values: Mapping[str, Any]) -> Dict[str, str]:
    """
    Evaluate rules against values.

    Args:
        rules: Ordered validation rules
        values: Field values keyed by field name

    Returns:
        Dict mapping each failing field to its first error message
    """
    errors: Dict[str, str] = {}
    for rule in rules:
        if rule.field in errors:
            continue
        if not rule.predicate(values.get(rule.field)):
            errors[rule.field] = rule.message
    return errors


def normalize_keys(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Map persisted camelCase keys onto their snake_case field names."""
    return {FIELD_ALIASES.get(key, key): value for key, value in values.items()}


def validate_transaction_form(values: Mapping[str, Any]) -> Dict[str, str]:
    """Return field errors for transaction form values (empty when valid)."""
    return evaluate_rules(TRANSACTION_RULES, normalize_keys(values))


def parse_transaction_form(values: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate and normalize transaction form values.

    Args:
        values: Raw form values (type, transaction_name, amount,
                transaction_date, optional comments)

    Returns:
        Dict of typed field values ready to build a Transaction

    Raises:
        ValidationError: If any field fails validation
    """
    fields = normalize_keys(values)
    errors = evaluate_rules(TRANSACTION_RULES, fields)
    if errors:
        raise ValidationError(errors)

    comments = fields.get("comments")
    return {
        "type": TransactionType.from_input(fields["type"]),
        "transaction_name": fields["transaction_name"],
        "amount": _to_decimal(fields["amount"]),
        "transaction_date": parse_date(fields["transaction_date"]),
        "comments": comments if _present(comments) else None,
    }


def validate_portfolio_name(name: Any) -> str:
    """
    Validate a portfolio name chosen at creation.

    Returns:
        The name with surrounding whitespace removed

    Raises:
        ValidationError: If the name is missing or has disallowed characters
    """
    errors = evaluate_rules(PORTFOLIO_NAME_RULES, {"name": name})
    if errors:
        raise ValidationError(errors)
    return name.strip()
