from datetime import date, datetime

# Day-first forms typed by store staff, besides ISO.
_DAY_FIRST_FORMATS = ("%d/%m/%Y", "%d-%m-%Y", "%d.%m.%Y")


def _parse_date_text(value_text: str):
    try:
        if "T" in value_text or " " in value_text:
            return datetime.fromisoformat(value_text.replace("Z", "+00:00")).date()
        return date.fromisoformat(value_text)
    except ValueError:
        pass
    for fmt in _DAY_FIRST_FORMATS:
        try:
            return datetime.strptime(value_text, fmt).date()
        except ValueError:
            continue
    return None


def normalize_date(value):
    """Reduce ``value`` to a calendar date, or None when it is not one.

    Accepts dates, datetimes (time of day dropped), ISO text including
    timestamps such as ``2025-03-10T18:00:00Z``, and ``DD/MM/YYYY``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        value_text = value.strip()
        if not value_text:
            return None
        return _parse_date_text(value_text)
    return None


def today() -> date:
    return date.today()
