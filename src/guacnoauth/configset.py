"""The <configs> document read by the Guacamole no-auth extension."""

# Standard Python Libraries
import logging
import xml.etree.ElementTree as ET

from .links import build_client_link, build_link
from .protocols import ProtocolConfig, Rdp, Ssh, Vnc
from .storage import write_config
from .validators import validate_future_timestamp


class ConfigSet:
    """An ordered set of connections plus the settings that govern the file.

    The base URL and storage directory are only needed for writing the
    document and building links to it.

    """

    def __init__(self, base_url: str = "", storage_dir: str = ""):
        """Create an empty set for the gateway at base_url reading from storage_dir."""
        self.base_url = base_url
        self.storage_dir = storage_dir
        self.configs = []
        self.delete = False
        self.valid_to = None

    def __len__(self):
        """Return the number of connections in the set."""
        return len(self.configs)

    def add_config(self, config: ProtocolConfig):
        """Append config to the set and return self."""
        self.configs.append(config)
        return self

    def set_delete(self, delete):
        """Make the gateway delete the file once used, so the link works once."""
        self.delete = bool(delete)
        return self

    def set_valid_to(self, valid_to):
        """Set the time after which the gateway ignores the file.

        valid_to is a datetime or a POSIX timestamp and must be in the
        future.  None removes the limit.

        """
        if valid_to is None:
            self.valid_to = None
        else:
            self.valid_to = validate_future_timestamp(valid_to)
        return self

    @staticmethod
    def new_rdp(name: str, hostname: str) -> Rdp:
        """Return a new RDP connection, not yet added to the set."""
        return Rdp(name, hostname)

    @staticmethod
    def new_vnc(name: str, hostname: str) -> Vnc:
        """Return a new VNC connection, not yet added to the set."""
        return Vnc(name, hostname)

    @staticmethod
    def new_ssh(name: str, hostname: str) -> Ssh:
        """Return a new SSH connection, not yet added to the set."""
        return Ssh(name, hostname)

    def valid_to_iso(self):
        """Return valid_to in local time as an ISO 8601 string, or None if unset."""
        if self.valid_to is None:
            return None
        return self.valid_to.astimezone().isoformat(timespec="seconds")

    def render(self) -> ET.Element:
        """Return the set as a <configs> element."""
        configs = ET.Element("configs", delete="true" if self.delete else "false")
        if self.valid_to is not None:
            configs.set("valid_to", self.valid_to_iso())
        for config in self.configs:
            configs.append(config.render())
        return configs

    def __str__(self):
        """Return the indented document, without a declaration, and a newline."""
        configs = self.render()
        ET.indent(configs)
        return ET.tostring(configs, encoding="unicode") + "\n"

    def to_xml(self) -> bytes:
        """Return the document, with an XML declaration, encoded as UTF-8."""
        configs = self.render()
        ET.indent(configs)
        return ET.tostring(configs, encoding="UTF-8", xml_declaration=True) + b"\n"

    def write(self, ident, username=None, overwrite=False) -> str:
        """Write the document into the storage directory and return its path."""
        return write_config(self, self.storage_dir, ident, username, overwrite)

    def get_link(self, ident, username=None, write_config=True) -> str:
        """Return the gateway link for ident, writing the file first by default."""
        if write_config:
            self.write(ident, username)
        return build_link(self.base_url, ident, username)

    def get_client_link(
        self, ident, connection_name: str, username=None, write_config=True
    ) -> str:
        """Return a link opening connection_name, writing the file first by default."""
        if write_config:
            self.write(ident, username)
        if connection_name not in (config.name for config in self.configs):
            logging.warning(
                "No connection named %s is part of this configuration.",
                connection_name,
            )
        return build_client_link(self.base_url, connection_name, ident, username)
