"""A dataclass container for the SFTP parameters of a Guacamole connection."""


# Standard Python Libraries
from dataclasses import dataclass, fields

from .validators import validate_port


@dataclass
class SftpParameters:
    """A dataclass container for the SFTP parameters of a Guacamole connection.

    RDP and VNC connections embed one of these to offer file transfer
    alongside the remote desktop.  Fields left as None are omitted
    from the rendered configuration, and the fields are rendered in
    the order in which they are declared here.

    """

    """Whether file transfer via SFTP is enabled."""
    enable_sftp: bool = None

    """The SFTP server, if different from the connection hostname."""
    sftp_hostname: str = None

    """The port of the SFTP server."""
    sftp_port: int = None

    """The user name to use when authenticating with the SFTP server."""
    sftp_username: str = None

    """The password to use when authenticating with the SFTP server."""
    sftp_password: str = None

    """The private SSH key to use when authenticating with the SFTP server."""
    sftp_private_key: str = None

    """The passphrase protecting the private SSH key."""
    sftp_passphrase: str = None

    """The directory in which uploaded files are placed."""
    sftp_directory: str = None

    """The directory exposed as the root of the file browser."""
    sftp_root_directory: str = None

    """The interval in seconds between SFTP keepalive messages."""
    sftp_server_alive_interval: int = None

    def __setattr__(self, name, value):
        """Validate the SFTP port before storing it."""
        if name == "sftp_port" and value is not None:
            value = validate_port(value)
        super().__setattr__(name, value)

    @classmethod
    def names(cls):
        """Return the field names in declaration order."""
        return tuple(field.name for field in fields(cls))

    def items(self):
        """Yield (field name, value) pairs for the fields that are set."""
        for name in self.names():
            value = getattr(self, name)
            if value is not None:
                yield name, value
