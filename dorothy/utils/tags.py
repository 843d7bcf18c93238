import json


def encode_tags(tags):
    """Serialize a list of tags for storage in a text column."""
    return json.dumps([str(tag) for tag in (tags or [])])


def decode_tags(raw):
    """Parse a stored tag column back into a list of strings.

    Missing, malformed or non-list values all read as an empty list.
    """
    if not raw:
        return []
    if isinstance(raw, list):
        return [str(tag) for tag in raw]
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return []
    if not isinstance(parsed, list):
        return []
    return [str(tag) for tag in parsed]
