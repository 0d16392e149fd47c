# rentmatch/services/timestamps.py
from datetime import datetime, timezone

from ..errors import InvalidTimestamp


def field(record, name, default=None):
    """Read ``name`` from a model instance or from a dict returned by the API."""
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


def normalize(value):
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value, record_id=None):
    """
    Accepts a datetime or an ISO-8601 string (a trailing 'Z' is allowed).
    Raises InvalidTimestamp for anything else, including None.
    """
    if isinstance(value, datetime):
        return normalize(value)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            return normalize(datetime.fromisoformat(text))
        except ValueError:
            pass
    raise InvalidTimestamp(record_id, value)


def resolve_now(now=None):
    return normalize(now) if now is not None else datetime.now(timezone.utc)


def stamped(requests, status):
    """
    Split the records with ``status`` into (created_at, id, record) triples and
    the InvalidTimestamp errors for the ones that could not be dated.
    Triples come back sorted by created_at, ties broken by id ascending.
    """
    rows, invalid = [], []
    for rec in requests:
        if field(rec, 'status') != status:
            continue
        rec_id = field(rec, 'id')
        try:
            created = parse_timestamp(field(rec, 'created_at'), rec_id)
        except InvalidTimestamp as exc:
            invalid.append(exc)
            continue
        rows.append((created, rec_id, rec))
    rows.sort(key=lambda row: (row[0], _id_key(row[1])))
    return rows, invalid


def _id_key(rec_id):
    # integer ids from the database, strings from other backends
    if isinstance(rec_id, int):
        return (0, rec_id, '')
    return (1, 0, str(rec_id))


def sort_requests(requests):
    """Order records oldest first by created_at, then id. Undatable records go last."""
    def key(rec):
        try:
            created = parse_timestamp(field(rec, 'created_at'))
            return (0, created, _id_key(field(rec, 'id')))
        except InvalidTimestamp:
            return (1, datetime.min.replace(tzinfo=timezone.utc), _id_key(field(rec, 'id')))
    return sorted(requests, key=key)
