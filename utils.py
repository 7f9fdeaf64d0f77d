import re
import html
import json
import datetime
from bson import ObjectId

DATE_FORMAT = "%Y-%m-%d"
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def sanitize_input(input_string):
    """Strip HTML tags and escape special characters in user input."""
    if input_string is None:
        return ""
    # Remove HTML tags
    sanitized_string = re.sub('<[^<]+?>', '', input_string)
    # Convert special characters into HTML entities
    sanitized_string = html.escape(sanitized_string)
    return sanitized_string


# Serialize ObjectId and datetime for JSON
class JSONEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, ObjectId):
            return str(o)
        if isinstance(o, (datetime.datetime, datetime.date)):
            return o.isoformat()
        return json.JSONEncoder.default(self, o)


def overlaps(a_start, a_end, b_start, b_end):
    """True if the inclusive ranges [a_start, a_end] and [b_start, b_end] share a day.

    Dates are YYYY-MM-DD strings; fixed-width zero-padded strings sort like dates.
    """
    return a_start <= b_end and b_start <= a_end


def is_iso_date(value):
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        return False
    try:
        datetime.datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return False
    return True


def to_iso_date(value):
    """Accept a date or a YYYY-MM-DD string and return the string form."""
    if isinstance(value, datetime.datetime):
        return value.date().isoformat()
    if isinstance(value, datetime.date):
        return value.isoformat()
    return value


def rental_days(start_date, end_date):
    """Days charged for a rental; a same-day rental still counts as one day."""
    start = datetime.datetime.strptime(start_date, DATE_FORMAT).date()
    end = datetime.datetime.strptime(end_date, DATE_FORMAT).date()
    return abs((end - start).days) or 1


def calculate_total_price(start_date, end_date, price_per_day):
    """Total rental price for the date range."""
    return price_per_day * rental_days(start_date, end_date)
