
from validapro.core.dates import normalize_date, today


def days_remaining(expiration_date, as_of_date=None) -> int:
    """Whole days from ``as_of_date`` (default today) until ``expiration_date``.

    Both values are reduced to calendar dates first, so a datetime late in the
    day never rounds a partial day away. Negative for expired stock.
    """
    expires_on = normalize_date(expiration_date)
    if expires_on is None:
        raise ValueError(f"Invalid expiration date: {expiration_date!r}")
    if as_of_date is None:
        as_of = today()
    else:
        as_of = normalize_date(as_of_date)
        if as_of is None:
            raise ValueError(f"Invalid reference date: {as_of_date!r}")
    return (expires_on - as_of).days


def is_low_stock(quantity, threshold) -> bool:
    return quantity < threshold


def is_expiring_soon(remaining, window_days) -> bool:
    return remaining < window_days
