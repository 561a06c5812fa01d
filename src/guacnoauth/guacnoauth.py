"""Write a Guacamole no-auth connection configuration and print the link that opens it.

The configuration file is written into the directory from which the
Guacamole user-files authentication extension reads, under a name
derived from the username and ident.  The printed link carries the
same username and ident so that the gateway can find the file.

EXIT STATUS
  0   The configuration was written (or shown) successfully.
  >0  An error occurred.

Usage:
  guacnoauth write [--log-level=LEVEL] [--base-url=URL] [--storage-dir=DIRECTORY] [--username=USERNAME] --ident=IDENT [--protocol=PROTOCOL] --name=NAME --hostname=HOSTNAME [--port=PORT] [--password=PASSWORD|--password-file=FILENAME] [--param=PARAMETER]... [--delete] [--valid-for=SECONDS] [--overwrite] [--connection-link] [--dry-run]
  guacnoauth show [--log-level=LEVEL] FILENAME
  guacnoauth (-h | --help)
  guacnoauth --version

Options:
  -h --help              Show this message.
  --version              Show the version and exit.
  --log-level=LEVEL      If specified, then the log level will be set to
                         the specified value.  Valid values are "debug", "info",
                         "warning", "error", and "critical". [default: info]
  --base-url=URL         The URL of the Guacamole web application. [default: http://localhost:8080/guacamole/]
  --storage-dir=DIRECTORY    The directory from which Guacamole reads no-auth configuration files. [default: /etc/guacamole]
  --username=USERNAME    If specified then the configuration file is written for, and the link logs in as, this user.
  --ident=IDENT          The identifier of the configuration.  Identifiers that are not 3 to 40 word characters are replaced by their SHA-1 digest.
  --protocol=PROTOCOL    The connection protocol.  Valid values are "rdp", "vnc", and "ssh". [default: rdp]
  --name=NAME            The name of the connection.
  --hostname=HOSTNAME    The host to connect to.
  --port=PORT            If specified then the connection uses this port instead of the protocol default.
  --password=PASSWORD    If specified then the specified value will be used as the connection password.
  --password-file=FILENAME    If specified then the connection password will be read from this file.
  --param=PARAMETER      An additional connection parameter of the form NAME=VALUE, for example enable-drive=true.  May be repeated.
  --delete               If present then Guacamole deletes the configuration file once it has been used, so the link only works once.
  --valid-for=SECONDS    If specified then Guacamole ignores the configuration file after this many seconds.
  --overwrite            If present then an existing configuration file with the same name is replaced.
  --connection-link      If present then the printed link opens the connection directly instead of the Guacamole home page.
  --dry-run              If present then the configuration is printed instead of written.
"""


# Standard Python Libraries
import logging
import sys
import time

# Third-Party Libraries
import docopt
from schema import And, Optional, Or, Schema, SchemaError, Use

from ._version import __version__
from .configset import ConfigSet
from .exceptions import ValidationError
from .links import build_client_link, build_link
from .protocols import PROTOCOL_CLASSES, Protocol, ProtocolConfig
from .reader import TRUE_VALUES, read_config_file

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")

FALSE_VALUES = ("no", "false", "0")

PARAMETER_SCHEMAS = {
    bool: Schema(
        And(
            Use(lambda value: value.strip().lower()),
            lambda value: value in TRUE_VALUES + FALSE_VALUES,
            Use(lambda value: value in TRUE_VALUES),
            error="Value for a boolean parameter must be one of "
            + "true, yes, 1, false, no, and 0.",
        )
    ),
    int: Schema(
        And(Use(int), error="Value for an integer parameter must be an integer.")
    ),
    str: Schema(str),
}


def convert_parameter(config: ProtocolConfig, name: str, value: str):
    """Return value converted to the type of the parameter called name."""
    parameter = config.lookup(name)
    try:
        return PARAMETER_SCHEMAS[parameter.kind].validate(value)
    except SchemaError as err:
        raise ValidationError(f"{parameter.param_name}: {err}") from err


def build_config_set(validated_args) -> ConfigSet:
    """Return a configuration set holding the single connection described by the arguments."""
    config_set = ConfigSet(validated_args["--base-url"], validated_args["--storage-dir"])

    config_class = PROTOCOL_CLASSES[Protocol(validated_args["--protocol"])]
    config = config_class(validated_args["--name"], validated_args["--hostname"])

    if validated_args["--port"] is not None:
        config.set_port(validated_args["--port"])

    password = validated_args["--password"]
    if password is None and validated_args["--password-file"] is not None:
        with open(validated_args["--password-file"], "r") as file:
            password = file.read().rstrip("\n")
    if password is not None:
        config.set_password(password)

    for name, value in validated_args["--param"]:
        logging.debug("Setting parameter %s of connection %s.", name, config.name)
        config.set(name, convert_parameter(config, name, value))

    config_set.add_config(config).set_delete(validated_args["--delete"])

    valid_for = validated_args["--valid-for"]
    if valid_for is not None:
        config_set.set_valid_to(time.time() + valid_for)
        logging.debug("Configuration is valid until %s.", config_set.valid_to_iso())

    return config_set


def write(validated_args) -> None:
    """Write (or print) the configuration and print its link."""
    config_set = build_config_set(validated_args)
    ident = validated_args["--ident"]
    username = validated_args["--username"]

    if validated_args["--dry-run"]:
        logging.info("Not writing the configuration because --dry-run is present.")
        print(config_set, end="")
    else:
        config_set.write(ident, username, overwrite=validated_args["--overwrite"])

    if validated_args["--connection-link"]:
        link = build_client_link(
            config_set.base_url, validated_args["--name"], ident, username
        )
    else:
        link = build_link(config_set.base_url, ident, username)
    print(link)


def show(filename) -> None:
    """Print a summary of the configuration file."""
    loaded = read_config_file(filename)
    print(f"delete: {'true' if loaded.delete else 'false'}")
    if loaded.valid_to is not None:
        expired = " (expired)" if loaded.expired else ""
        print(f"valid_to: {loaded.valid_to.isoformat()}{expired}")
    for name, (protocol, parameters) in loaded.configs.items():
        print(f"{name} ({protocol})")
        for param_name, value in parameters.items():
            print(f"  {param_name} = {value}")


def main() -> None:
    """Write or show a Guacamole no-auth configuration."""
    # Parse command line arguments
    args = docopt.docopt(__doc__, version=__version__)
    # Validate and convert arguments as needed
    schema = Schema(
        {
            "--log-level": And(
                str,
                Use(str.lower),
                lambda n: n in LOG_LEVELS,
                error="Possible values for --log-level are "
                + "debug, info, warning, error, and critical.",
            ),
            Optional("--protocol"): Or(
                None,
                And(
                    str,
                    Use(str.lower),
                    lambda p: p in [protocol.value for protocol in Protocol],
                    error="Possible values for --protocol are rdp, vnc, and ssh.",
                ),
            ),
            Optional("--port"): Or(
                None,
                And(
                    Use(int),
                    lambda n: n >= 10,
                    error="Value for --port must be an integer no lower than 10.",
                ),
            ),
            Optional("--valid-for"): Or(
                None,
                And(
                    Use(float),
                    lambda s: s > 0,
                    error="Value for --valid-for must be a positive number of seconds.",
                ),
            ),
            Optional("--param"): [
                And(
                    str,
                    lambda p: "=" in p,
                    Use(lambda p: tuple(p.split("=", 1))),
                    error="Values for --param must have the form NAME=VALUE.",
                )
            ],
            str: object,  # Don't care about other keys, if any
        }
    )
    try:
        validated_args = schema.validate(args)
    except SchemaError as err:
        # Exit because one or more of the arguments were invalid
        print(err, file=sys.stderr)
        sys.exit(1)

    # Set up logging
    log_level = validated_args["--log-level"]
    logging.basicConfig(
        format="%(asctime)-15s %(levelname)s %(message)s", level=log_level.upper()
    )

    try:
        if validated_args["write"]:
            write(validated_args)
        elif validated_args["show"]:
            show(validated_args["FILENAME"])
    except (ValidationError, OSError) as err:
        # Exit because the configuration could not be built or written
        print(err, file=sys.stderr)
        sys.exit(1)

    logging.shutdown()
