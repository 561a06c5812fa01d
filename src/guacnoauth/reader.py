"""Read a configuration document back the way the gateway extension does."""

# Standard Python Libraries
from dataclasses import dataclass, field
import datetime
import logging
import xml.etree.ElementTree as ET

from .exceptions import ValidationError

# The valid_to formats accepted by the gateway, most specific first
VALID_TO_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
)

TRUE_VALUES = ("yes", "true", "1")


@dataclass
class LoadedConfigs:
    """The contents of a configuration document."""

    """Whether the gateway deletes the file after reading it."""
    delete: bool = False

    """The time after which the gateway ignores the file, if any."""
    valid_to: datetime.datetime = None

    """The connections, keyed by name, as (protocol, parameters) pairs."""
    configs: dict = field(default_factory=dict)

    @property
    def expired(self) -> bool:
        """Return True if valid_to has passed."""
        if self.valid_to is None:
            return False
        return self.valid_to < datetime.datetime.now(datetime.timezone.utc)


def parse_valid_to(value: str):
    """Return value as an aware datetime, or None if no known format matches."""
    for valid_to_format in VALID_TO_FORMATS:
        try:
            when = datetime.datetime.strptime(value, valid_to_format)
        except ValueError:
            continue
        if when.tzinfo is None:
            when = when.astimezone()
        return when
    logging.warning('Invalid "valid_to" date %s will be ignored.', value)
    return None


def parse_configs(root: ET.Element) -> LoadedConfigs:
    """Return the contents of a parsed <configs> element."""
    loaded = LoadedConfigs()
    if root.get("delete", "").lower() in TRUE_VALUES:
        loaded.delete = True
    valid_to = root.get("valid_to")
    if valid_to is not None:
        loaded.valid_to = parse_valid_to(valid_to)

    parse_children(root, loaded)
    return loaded


def parse_children(element: ET.Element, loaded: LoadedConfigs, parameters=None):
    """Add the connections below element to loaded.

    parameters is the dictionary of the enclosing <config>, or None
    outside of one.  Elements other than <config> and <param> are
    descended into, so the checks apply at any depth.

    """
    for child in element:
        if child.tag == "config":
            if parameters is not None:
                raise ValidationError("Configurations cannot be nested.")
            name = child.get("name")
            if name is None:
                raise ValidationError("Each configuration must have a name.")
            protocol = child.get("protocol")
            if protocol is None:
                raise ValidationError("Each configuration must have a protocol.")
            config_parameters = {}
            parse_children(child, loaded, config_parameters)
            loaded.configs[name] = (protocol, config_parameters)
        elif child.tag == "param":
            if parameters is None:
                raise ValidationError(
                    "Parameter without corresponding configuration."
                )
            parameters[child.get("name")] = child.get("value")
            parse_children(child, loaded, parameters)
        else:
            parse_children(child, loaded, parameters)


def read_config_file(path) -> LoadedConfigs:
    """Return the contents of the configuration file at path."""
    logging.debug("Reading configuration file %s.", path)
    try:
        tree = ET.parse(path)
    except ET.ParseError as err:
        raise ValidationError(f"Error parsing XML file {path}: {err}") from err
    loaded = parse_configs(tree.getroot())
    if loaded.expired:
        logging.warning(
            "Configuration file %s expired at %s.", path, loaded.valid_to.isoformat()
        )
    return loaded
