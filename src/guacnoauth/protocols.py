"""Guacamole connection configurations for the RDP, VNC, and SSH protocols.

Each protocol declares the parameters it accepts as an ordered table.
A configuration renders as a <config> element with one <param> child
per parameter that has been set, in table order.  The table order is
the protocol's own parameters, then the SFTP parameters (RDP and VNC
only), then hostname, port, and password unless the protocol already
declares them.

Parameters are set with fluent setters generated from the table:

    Rdp("TestVm RDP", "192.168.0.130").set_domain("WORKGROUP").set_port(3389)

"""

# Standard Python Libraries
from dataclasses import fields
import enum
from functools import partialmethod
import logging
from typing import NamedTuple
import xml.etree.ElementTree as ET

from .exceptions import ValidationError
from .SftpParameters import SftpParameters
from .validators import validate_color_depth, validate_port


class Protocol(enum.Enum):
    """The protocols understood by the Guacamole gateway."""

    RDP = "rdp"
    VNC = "vnc"
    SSH = "ssh"


class Parameter(NamedTuple):
    """An entry in a protocol's parameter table."""

    name: str
    kind: type = str

    @property
    def param_name(self) -> str:
        """Return the name used for this parameter in the XML document."""
        return self.name.replace("_", "-")


BASE_PARAMETERS = (
    Parameter("hostname"),
    Parameter("port", int),
    Parameter("password"),
)

SFTP_PARAMETERS = tuple(Parameter(f.name, f.type) for f in fields(SftpParameters))


def format_value(value) -> str:
    """Return the string form of a parameter value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ProtocolConfig:
    """A single named Guacamole connection.

    Subclasses set protocol and PARAMETERS.  The connection name and
    hostname are fixed at construction; every other parameter starts
    out unset.

    """

    protocol: Protocol = None
    PARAMETERS: tuple = ()
    SFTP = False
    VALIDATORS = {"port": validate_port}

    def __init_subclass__(cls, **kwargs):
        """Generate the set_* and get_* accessors for each parameter."""
        super().__init_subclass__(**kwargs)
        for parameter in cls.parameter_table():
            if parameter.name == "hostname":
                continue
            for prefix, method in (
                ("set_", ProtocolConfig.set),
                ("get_", ProtocolConfig.get),
            ):
                accessor = prefix + parameter.name
                if accessor not in cls.__dict__:
                    setattr(cls, accessor, partialmethod(method, parameter.name))

    def __init__(self, name: str, hostname: str):
        """Create a connection named name to hostname."""
        if self.protocol is None:
            raise TypeError(f"{type(self).__name__} does not define a protocol.")
        self._name = name
        self._values = {
            parameter.name: None
            for parameter in self.PARAMETERS + BASE_PARAMETERS
        }
        self._values["hostname"] = hostname
        self.sftp = SftpParameters() if self.SFTP else None

    def __repr__(self):
        """Return the class, name, and hostname of the connection."""
        return f"{type(self).__name__}(name={self._name!r}, hostname={self.hostname!r})"

    @property
    def name(self) -> str:
        """Return the name under which the gateway lists this connection."""
        return self._name

    @property
    def hostname(self) -> str:
        """Return the host to connect to."""
        return self._values["hostname"]

    @classmethod
    def parameter_table(cls):
        """Return the ordered table of parameters this protocol accepts."""
        own_names = {parameter.name for parameter in cls.PARAMETERS}
        sftp = SFTP_PARAMETERS if cls.SFTP else ()
        base = tuple(p for p in BASE_PARAMETERS if p.name not in own_names)
        return cls.PARAMETERS + sftp + base

    @classmethod
    def lookup(cls, name: str) -> Parameter:
        """Return the parameter called name, given in either internal or XML form."""
        internal_name = name.replace("-", "_")
        for parameter in cls.parameter_table():
            if parameter.name == internal_name:
                return parameter
        raise ValidationError(
            f"{cls.protocol.value} connections have no parameter named {name}."
        )

    def set(self, name: str, value):
        """Set the parameter called name to value and return self.

        A value of None unsets the parameter.

        """
        parameter = self.lookup(name)
        if parameter.name == "hostname":
            raise ValidationError(
                "The hostname is fixed when the connection is created."
            )
        validator = self.VALIDATORS.get(parameter.name)
        if validator is not None:
            value = validator(value)
        if parameter.name in SftpParameters.names() and self.sftp is not None:
            setattr(self.sftp, parameter.name, value)
        else:
            self._values[parameter.name] = value
        return self

    def get(self, name: str):
        """Return the value of the parameter called name, or None if it is unset."""
        parameter = self.lookup(name)
        if parameter.name in SftpParameters.names() and self.sftp is not None:
            return getattr(self.sftp, parameter.name)
        return self._values[parameter.name]

    def parameters(self):
        """Yield (XML name, string value) pairs for the parameters that are set."""
        for parameter in self.parameter_table():
            value = self.get(parameter.name)
            if value is None:
                continue
            yield parameter.param_name, format_value(value)

    def render(self) -> ET.Element:
        """Return this connection as a <config> element."""
        config = ET.Element("config", name=self.name, protocol=self.protocol.value)
        for param_name, value in self.parameters():
            ET.SubElement(config, "param", name=param_name, value=value)
        logging.debug(
            "Rendered %s connection %s with %d parameters.",
            self.protocol.value,
            self.name,
            len(config),
        )
        return config

    def __str__(self):
        """Return the indented <config> element followed by a newline."""
        config = self.render()
        ET.indent(config)
        return ET.tostring(config, encoding="unicode") + "\n"


class Rdp(ProtocolConfig):
    """A connection using the Remote Desktop Protocol."""

    protocol = Protocol.RDP
    SFTP = True
    VALIDATORS = {**ProtocolConfig.VALIDATORS, "color_depth": validate_color_depth}

    SECURITY_RDP = "rdp"
    SECURITY_NLA = "nla"
    SECURITY_TLS = "tls"
    SECURITY_ANY = "any"

    PARAMETERS = (
        # Authentication
        Parameter("username"),
        Parameter("password"),
        Parameter("domain"),
        Parameter("security"),
        Parameter("ignore_cert", bool),
        Parameter("disable_auth", bool),
        # Session settings
        Parameter("client_name"),
        Parameter("console", bool),
        Parameter("initial_program"),
        Parameter("server_layout"),
        # Display settings
        Parameter("color_depth", int),
        Parameter("width", int),
        Parameter("height", int),
        Parameter("dpi", int),
        # Device redirection
        Parameter("disable_audio", bool),
        Parameter("enable_printing", bool),
        Parameter("enable_drive", bool),
        Parameter("drive_path"),
        Parameter("create_drive_path", bool),
        Parameter("console_audio", bool),
        Parameter("static_channels"),
        # Performance flags
        Parameter("enable_wallpaper", bool),
        Parameter("enable_theming", bool),
        Parameter("enable_font_smoothing", bool),
        Parameter("enable_full_window_drag", bool),
        Parameter("enable_desktop_composition", bool),
        Parameter("enable_menu_animations", bool),
        # RemoteApp
        Parameter("remote_app"),
        Parameter("remote_app_dir"),
        Parameter("remote_app_args"),
    )


class Vnc(ProtocolConfig):
    """A connection using the VNC protocol."""

    protocol = Protocol.VNC
    SFTP = True
    VALIDATORS = {**ProtocolConfig.VALIDATORS, "color_depth": validate_color_depth}

    PARAMETERS = (
        Parameter("autoretry", int),
        # Display settings
        Parameter("color_depth", int),
        Parameter("swap_red_blue", bool),
        Parameter("cursor"),
        Parameter("encodings"),
        Parameter("read_only", bool),
        # VNC repeater
        Parameter("dest_host"),
        Parameter("dest_port", int),
        # Reverse connections
        Parameter("reverse_connect", bool),
        Parameter("listen_timeout", int),
        # Audio via PulseAudio
        Parameter("enable_audio", bool),
        Parameter("audio_servername"),
        Parameter("clipboard_encoding"),
    )


class Ssh(ProtocolConfig):
    """A connection using the SSH protocol."""

    protocol = Protocol.SSH

    PARAMETERS = (
        Parameter("username"),
        Parameter("private_key"),
        Parameter("passphrase"),
        # Display settings
        Parameter("font_name"),
        Parameter("font_size", int),
        Parameter("color_scheme"),
        Parameter("command"),
        Parameter("server_alive_interval", int),
    )


PROTOCOL_CLASSES = {cls.protocol: cls for cls in (Rdp, Vnc, Ssh)}
