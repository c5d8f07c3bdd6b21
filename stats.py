"""Sales figures for the admin, host and guest dashboards."""

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Union

CHART_HEADER = ["Day", "Sales"]

# Only these fields are read from bookings
BOOKING_PROJECTION = {"date": 1, "price": 1}


def _as_date(value: Union[str, date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return date.fromisoformat(text[:10])


def chart_label(value: Union[str, date, datetime]) -> str:
    d = _as_date(value)
    return f"{d.day}/{d.month}"


def sales_summary(bookings: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    bookings = list(bookings)
    total_price = sum(b.get("price") or 0 for b in bookings)
    chart_data: List[list] = [CHART_HEADER]
    for b in bookings:
        if b.get("date") is None:
            continue
        try:
            label = chart_label(b["date"])
        except ValueError:
            # written by another client in a format we cannot chart
            continue
        chart_data.append([label, b.get("price") or 0])
    return {
        "totalBookings": len(bookings),
        "totalPrice": total_price,
        "chartData": chart_data,
    }
