from flask import request

from dorothy.exceptions import InvalidBodyError, NotFoundError


def parse_body(schema):
    """Validate the JSON body; pydantic errors become 400 Invalid body."""
    return schema.model_validate(request.get_json(silent=True))


def parse_id(raw_id):
    try:
        return int(raw_id)
    except (TypeError, ValueError):
        raise InvalidBodyError("Invalid id")


def get_or_404(repository, raw_id):
    record = repository.get(parse_id(raw_id))
    if not record:
        raise NotFoundError("Not found")
    return record


def query_upper(name, default=None):
    value = request.args.get(name, default)
    return value.strip().upper() if value else None
