#!/usr/bin/env pytest -vs
"""Tests for configuration file names, file writing, and links."""

# Standard Python Libraries
import hashlib
from unittest.mock import MagicMock

# Third-Party Libraries
import pytest

# cisagov Libraries
from guacnoauth import (
    ConfigSet,
    Ssh,
    ValidationError,
    build_client_link,
    build_link,
    config_filename,
    normalize_ident,
    write_config,
)

HASHED_IDENT = "07a91fea0929d0c7ba30fb8e63eb506b6b242e3a"


@pytest.mark.parametrize(
    "ident,expected",
    [
        ("1337", "1337"),
        (1337, "1337"),
        ("abc", "abc"),
        ("a" * 40, "a" * 40),
        ("session_2024", "session_2024"),
        ("not an ident!", HASHED_IDENT),
        ("abc\n", hashlib.sha1(b"abc\n").hexdigest()),  # nosec
        ("ab", hashlib.sha1(b"ab").hexdigest()),  # nosec
        ("a" * 41, hashlib.sha1(b"a" * 41).hexdigest()),  # nosec
        ("../../etc/passwd", hashlib.sha1(b"../../etc/passwd").hexdigest()),  # nosec
    ],
)
def test_normalize_ident(ident, expected):
    """Verify that only unusable identifiers are replaced by their digest."""
    assert normalize_ident(ident) == expected


def test_config_filename():
    """Verify the name of the configuration file."""
    assert config_filename("1337", "mst_henh") == "mst_henh_1337_noauth-config.xml"
    assert config_filename("1337") == "anonymous_1337_noauth-config.xml"
    assert config_filename("not an ident!") == (
        f"anonymous_{HASHED_IDENT}_noauth-config.xml"
    )


@pytest.mark.parametrize(
    "username", ["Jürgen Müller", "René-Hélène", "Straße", "x"]
)
def test_allowed_usernames(username):
    """Verify that spaces, hyphens, and the listed accented letters are allowed."""
    assert config_filename("1337", username).startswith(f"{username}_1337_")


@pytest.mark.parametrize(
    "username", ["../root", "a/b", "dot.name", "semi;colon", "Ωmega"]
)
def test_disallowed_usernames(username):
    """Verify that other characters are rejected."""
    with pytest.raises(ValidationError):
        config_filename("1337", username)


def test_write_config(tmp_path):
    """Verify that the document is written under the expected name."""
    config_set = ConfigSet().add_config(Ssh("shell", "10.0.0.5"))
    path = write_config(config_set, str(tmp_path), "1337", "mst_henh")
    assert path == str(tmp_path / "mst_henh_1337_noauth-config.xml")
    with open(path, "rb") as file:
        assert file.read() == config_set.to_xml()


def test_write_config_missing_directory(tmp_path):
    """Verify that a missing directory is reported."""
    with pytest.raises(FileNotFoundError) as excinfo:
        write_config(ConfigSet(), str(tmp_path / "missing"), "1337")
    assert isinstance(excinfo.value, IOError)


def test_write_config_existing_file(tmp_path):
    """Verify that an existing file is only replaced when allowed."""
    existing = tmp_path / "anonymous_1337_noauth-config.xml"
    existing.write_text("old")
    with pytest.raises(FileExistsError):
        write_config(ConfigSet(), str(tmp_path), "1337")
    assert existing.read_text() == "old"

    write_config(ConfigSet(), str(tmp_path), "1337", overwrite=True)
    assert existing.read_bytes() == ConfigSet().to_xml()


def test_write_config_nothing_written(tmp_path):
    """Verify that writing zero bytes is reported."""
    config_set = MagicMock(name="Mock configuration set")
    config_set.to_xml.return_value = b""
    with pytest.raises(OSError):
        write_config(config_set, str(tmp_path), "1337")


def test_write_config_invalid_username(tmp_path):
    """Verify that the filename is checked before anything is written."""
    with pytest.raises(ValidationError):
        write_config(ConfigSet(), str(tmp_path), "1337", "a/b")
    assert not list(tmp_path.iterdir())


@pytest.mark.parametrize(
    "base_url",
    [
        "http://localhost:8080/guacamole",
        "http://localhost:8080/guacamole/",
        "http://localhost:8080/guacamole/#",
        "http://localhost:8080/guacamole/#/",
        "http://localhost:8080/guacamole//",
    ],
)
def test_build_link_trims_base_url(base_url):
    """Verify that trailing slashes and hashes are removed from the base URL."""
    assert build_link(base_url, "1337", "mst_henh") == (
        "http://localhost:8080/guacamole/#/?username=mst_henh&ident=1337"
    )


def test_build_link_encodes_values():
    """Verify that the query values are URL encoded."""
    assert build_link("https://gw.example.com/", "1337", "john doe&co") == (
        "https://gw.example.com/#/?username=john%20doe%26co&ident=1337"
    )
    assert build_link("https://gw.example.com/", "not an ident!") == (
        f"https://gw.example.com/#/?ident={HASHED_IDENT}"
    )


def test_build_client_link():
    """Verify the link that opens a named connection."""
    assert build_client_link(
        "http://localhost:8080/guacamole/", "TestVm RDP", "1337", "mst_henh"
    ) == (
        "http://localhost:8080/guacamole/#/client/"
        "VGVzdFZtIFJEUABjAHVzZXJmaWxlc2F1dGg=?username=mst_henh&ident=1337"
    )
    assert build_client_link("http://gw/", "TestVm RDP", "1337") == (
        "http://gw/#/client/VGVzdFZtIFJEUABjAHVzZXJmaWxlc2F1dGg=?ident=1337"
    )


def test_write_config_trailing_newline_ident(tmp_path):
    """Verify that a trailing newline makes the identifier hashed."""
    digest = hashlib.sha1(b"abc\n").hexdigest()  # nosec
    path = write_config(ConfigSet(), str(tmp_path), "abc\n")
    assert path == str(tmp_path / f"anonymous_{digest}_noauth-config.xml")
    assert build_link("http://gw/", "abc\n") == f"http://gw/#/?ident={digest}"
