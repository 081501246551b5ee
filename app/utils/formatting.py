from datetime import date

_WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def format_date_display(day: date) -> str:
    """'Tuesday, 14.01.2025' (weekday names are not locale dependent)"""
    return f"{_WEEKDAYS[day.weekday()]}, {day.strftime('%d.%m.%Y')}"


def format_price(cents: int, currency: str = "EUR") -> str:
    """2500 -> '25,00 EUR'"""
    euros, rest = divmod(int(cents or 0), 100)
    return f"{euros},{rest:02d} {currency}"
