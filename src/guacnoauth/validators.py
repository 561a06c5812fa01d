"""Schema-based validation of the values that need it."""

# Standard Python Libraries
import datetime
import numbers

# Third-Party Libraries
from schema import And, Or, Schema, SchemaError, Use

from .exceptions import ValidationError

ALLOWED_COLOR_DEPTHS = (8, 16, 24, 32)
MINIMUM_PORT = 10

PORT_SCHEMA = Schema(
    And(
        lambda x: not isinstance(x, bool),
        Or(int, And(str, Use(str.strip), str.isdigit)),
        Use(int),
        lambda n: n >= MINIMUM_PORT,
        error=f"Invalid TCP port; it must be an integer no lower than {MINIMUM_PORT}.",
    )
)

COLOR_DEPTH_SCHEMA = Schema(
    Or(
        None,
        And(
            lambda x: not isinstance(x, bool),
            Or(int, And(str, Use(str.strip), str.isdigit)),
            Use(int),
            lambda n: n in ALLOWED_COLOR_DEPTHS,
        ),
        error="Invalid color depth.  Allowed are: None, 8, 16, 24, 32.",
    )
)

TIMESTAMP_SCHEMA = Schema(
    Or(
        datetime.datetime,
        And(
            numbers.Real,
            lambda x: not isinstance(x, bool),
            Use(lambda x: datetime.datetime.fromtimestamp(x).astimezone()),
        ),
        error="Invalid timestamp; expected a datetime or a POSIX timestamp.",
    )
)


def validate_port(value):
    """Return value as an integer port, raising ValidationError if it is not one."""
    try:
        return PORT_SCHEMA.validate(value)
    except SchemaError as err:
        raise ValidationError(str(err)) from err


def validate_color_depth(value):
    """Return value if it is an allowed color depth (or None)."""
    try:
        return COLOR_DEPTH_SCHEMA.validate(value)
    except SchemaError as err:
        raise ValidationError(str(err)) from err


def validate_future_timestamp(value) -> datetime.datetime:
    """Return value as an aware datetime if it lies in the future.

    Naive datetimes are taken to be in local time.

    """
    try:
        when = TIMESTAMP_SCHEMA.validate(value)
    except SchemaError as err:
        raise ValidationError(str(err)) from err
    if when.tzinfo is None:
        when = when.astimezone()
    if when <= datetime.datetime.now(datetime.timezone.utc):
        raise ValidationError(f"Timestamp {when.isoformat()} is not in the future.")
    return when
