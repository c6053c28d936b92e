import flask_smorest
from webargs.flaskparser import FlaskParser

from errors import ValidationError


class ArgumentsParser(FlaskParser):
    """Reports bad request bodies as 400 instead of webargs' 422."""

    def handle_error(self, error, req, schema, *, error_status_code=None, error_headers=None):
        raise ValidationError("Invalid request", errors=error.normalized_messages())


class Blueprint(flask_smorest.Blueprint):
    ARGUMENTS_PARSER = ArgumentsParser()
