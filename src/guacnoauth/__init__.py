"""The guacnoauth library."""
# We disable a Flake8 check for "Module imported but unused (F401)"
# here because, although this import is not directly used, it
# populates the value package_name.__version__, which is used to get
# version information about this Python package.
from ._version import __version__  # noqa: F401
from .configset import ConfigSet
from .exceptions import ValidationError
from .guacnoauth import main
from .links import build_client_link, build_link, normalize_ident
from .protocols import Parameter, Protocol, ProtocolConfig, Rdp, Ssh, Vnc
from .reader import LoadedConfigs, read_config_file
from .SftpParameters import SftpParameters
from .storage import config_filename, write_config

__all__ = [
    "ConfigSet",
    "LoadedConfigs",
    "Parameter",
    "Protocol",
    "ProtocolConfig",
    "Rdp",
    "SftpParameters",
    "Ssh",
    "ValidationError",
    "Vnc",
    "build_client_link",
    "build_link",
    "config_filename",
    "main",
    "normalize_ident",
    "read_config_file",
    "write_config",
]
