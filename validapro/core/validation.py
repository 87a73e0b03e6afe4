from validapro.core.constants import MAX_DB_INT, MIN_DB_INT
from validapro.core.dates import normalize_date
from validapro.core.errors import ValidationError


def is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def to_str(value, field, required=True):
    if is_blank(value):
        if required:
            raise ValidationError(f"{field} is required")
        return None
    return str(value).strip()


def to_int(value, field, required=True):
    if is_blank(value):
        if required:
            raise ValidationError(f"{field} is required")
        return None
    number = _coerce_int(value, field)
    if not MIN_DB_INT <= number <= MAX_DB_INT:
        raise ValidationError(f"{field} is out of range")
    return number


def _coerce_int(value, field):
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, str):
        value_text = value.strip()
        try:
            return int(value_text)
        except ValueError:
            try:
                numeric = float(value_text)
            except ValueError:
                raise ValidationError(f"{field} must be an integer") from None
            if not numeric.is_integer():
                raise ValidationError(f"{field} must be an integer")
            return int(numeric)
    raise ValidationError(f"{field} must be an integer")


def to_non_negative_int(value, field, required=True):
    number = to_int(value, field, required=required)
    if number is not None and number < 0:
        raise ValidationError(f"{field} must be non-negative")
    return number


def to_date(value, field, required=True):
    if is_blank(value):
        if required:
            raise ValidationError(f"{field} is required")
        return None
    parsed = normalize_date(value)
    if parsed is None:
        raise ValidationError(f"{field} must be a date (YYYY-MM-DD)")
    return parsed
