"""Jurisdiction resolution for mileage deductions."""

from vehicle_reports.domain.services.normalization import normalize_currency_code

CURRENCY_JURISDICTIONS: dict[str, str] = {
    "USD": "US",
    "CAD": "CA",
}


def resolve_jurisdiction(home_currency: str | None) -> str | None:
    """Return the tax jurisdiction implied by a home currency.

    The account's home currency stands in for an explicit country setting,
    so a Canadian account reporting in USD resolves to the United States.

    Args:
        home_currency: Account home currency code.

    Returns:
        str | None: Jurisdiction code, or None when no table applies.
    """
    code = normalize_currency_code(home_currency)
    if code is None:
        return None
    return CURRENCY_JURISDICTIONS.get(code)


__all__ = ["CURRENCY_JURISDICTIONS", "resolve_jurisdiction"]
