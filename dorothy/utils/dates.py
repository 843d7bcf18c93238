from datetime import date, datetime, timezone

WEEKDAYS_FR = ["lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche"]
MONTHS_FR = [
    "janvier",
    "février",
    "mars",
    "avril",
    "mai",
    "juin",
    "juillet",
    "août",
    "septembre",
    "octobre",
    "novembre",
    "décembre",
]


def utcnow():
    # Naive UTC, matching what the DateTime columns hand back.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    return value.isoformat() if value else None


def format_french_date(value):
    """Long French date, e.g. ``samedi 15 mars 2025``."""
    if value is None:
        return ""
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    if isinstance(value, datetime):
        value = value.date()
    return (
        f"{WEEKDAYS_FR[value.weekday()]} {value.day} "
        f"{MONTHS_FR[value.month - 1]} {value.year}"
    )
