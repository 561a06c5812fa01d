"""Write configuration documents where the Guacamole gateway will look for them."""

# Standard Python Libraries
import logging
import os
import re

from .exceptions import ValidationError
from .links import normalize_ident

NOAUTH_CONFIG_SUFFIX = "noauth-config.xml"

# The gateway looks for this prefix when a link carries no username
ANONYMOUS_USERNAME = "anonymous"

# The characters the gateway accepts in the part of the filename
# derived from the username and ident
FILENAME_PREFIX_REGEX = re.compile(r"[\w \-öÖäÄüÜßèéêù]+", re.ASCII)


def config_filename(ident, username=None) -> str:
    """Return the name of the file holding the configuration for username and ident.

    Without a username the file belongs to the anonymous user, as that
    is where the gateway looks when the link carries no username.

    """
    prefix = f"{username or ANONYMOUS_USERNAME}_{normalize_ident(ident)}_"
    if FILENAME_PREFIX_REGEX.fullmatch(prefix) is None:
        raise ValidationError(f"Invalid characters in username or ident: {prefix!r}")
    return prefix + NOAUTH_CONFIG_SUFFIX


def write_config(config_set, storage_dir, ident, username=None, overwrite=False) -> str:
    """Write config_set into storage_dir and return the path of the file written.

    The write is not atomic: the existence check and the write can
    race with another writer of the same file.

    """
    path = os.path.join(storage_dir, config_filename(ident, username))
    if not os.path.isdir(storage_dir):
        raise FileNotFoundError(
            f"Configuration directory {storage_dir} does not exist."
        )
    if os.path.exists(path) and not overwrite:
        raise FileExistsError(f"Configuration file {path} already exists.")

    document = config_set.to_xml()
    logging.debug("Writing %d bytes to %s.", len(document), path)
    with open(path, "wb") as file:
        written = file.write(document)
    if not written:
        raise OSError(f"No data was written to {path}.")

    logging.info("Wrote Guacamole configuration file %s.", path)
    return path
