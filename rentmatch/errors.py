# rentmatch/errors.py
from flask import jsonify
from werkzeug.exceptions import HTTPException


class RentMatchError(Exception):
    """Base class for failures surfaced to API callers."""
    error = 'rentmatch_error'
    status_code = 400

    def __init__(self, message=None, **payload):
        super().__init__(message or self.__doc__)
        self.message = message or self.__doc__
        self.payload = payload

    def to_dict(self):
        data = {'error': self.error, 'message': self.message}
        data.update(self.payload)
        return data


class DuplicateRequest(RentMatchError):
    """A pending request between this landlord and tenant already exists."""
    error = 'duplicate_request'
    status_code = 409


class LimitExceeded(RentMatchError):
    """The landlord already has the maximum number of active pending requests."""
    error = 'limit_exceeded'
    status_code = 409


class InvalidTransition(RentMatchError):
    """Only pending requests can be accepted or rejected."""
    error = 'invalid_transition'
    status_code = 409


class NotFound(RentMatchError):
    """The requested record does not exist."""
    error = 'not_found'
    status_code = 404


class ValidationFailed(RentMatchError):
    """The submitted data is invalid."""
    error = 'validation_failed'
    status_code = 400


class InvalidTimestamp(RentMatchError):
    """A request record has a malformed or missing creation timestamp.

    Policies never let this escape: the offending record is skipped and the
    error is handed back to the caller in the result's ``invalid`` list.
    """
    error = 'invalid_timestamp'
    status_code = 422

    def __init__(self, record_id=None, value=None):
        super().__init__(f'Request {record_id!r} has an invalid created_at: {value!r}')
        self.record_id = record_id
        self.value = value


# Maps wire error codes back to exception classes (used by the HTTP client)
ERRORS_BY_CODE = {
    cls.error: cls for cls in (
        DuplicateRequest, LimitExceeded, InvalidTransition, NotFound, ValidationFailed,
    )
}


def register_error_handlers(app):
    @app.errorhandler(RentMatchError)
    def rentmatch_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify(error=e.name.lower().replace(' ', '_')), e.code

    @app.errorhandler(500)
    def server_error(e):
        app.logger.exception('Unhandled error: %s', e)
        return jsonify(error='server_error'), 500
