"""
Dates Module - Display helpers for date ranges on portfolio pages
"""

from datetime import date, datetime


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        return datetime.strptime(value[:10], '%Y-%m-%d').date()
    return None


def format_date(value):
    """Month Day, Year - e.g. 'Jan 5, 2024'"""
    d = _as_date(value)
    if not d:
        return ''
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def calculate_duration(start, end=None, today=None):
    """
    Human readable span between two dates in years and months.

    A missing end date means the range is still running and is measured
    up to today. Anything shorter than a month reads '< 1 mo'.
    """
    start_date = _as_date(start)
    if not start_date:
        return ''
    end_date = _as_date(end) or today or date.today()

    years = end_date.year - start_date.year
    months = end_date.month - start_date.month
    if months < 0:
        years -= 1
        months += 12

    year_text = f"{years} {'yr' if years == 1 else 'yrs'}" if years > 0 else ''
    month_text = f"{months} {'mo' if months == 1 else 'mos'}" if months > 0 else ''

    if year_text and month_text:
        return f"{year_text}, {month_text}"
    return year_text or month_text or '< 1 mo'


__all__ = ['format_date', 'calculate_duration']
