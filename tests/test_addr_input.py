import io
import socket
from unittest import mock

import pytest

from asionet.addr_input import AddressError, get_addr_from_stream, read_host


def test_read_host_skips_blank_lines():
    assert read_host(io.StringIO("\n\n127.0.0.1\n")) == "127.0.0.1"


def test_read_host_without_trailing_newline():
    assert read_host(io.StringIO("localhost")) == "localhost"


def test_read_host_at_end_of_input():
    with pytest.raises(AddressError):
        read_host(io.StringIO("\n\n"))


def test_ipv4_address():
    result = get_addr_from_stream(8080, socket.SOCK_STREAM, io.StringIO("127.0.0.1\n"))
    assert result.family == socket.AF_INET
    assert result.ip_protocol == socket.IPPROTO_IP
    assert result.address == ("127.0.0.1", 8080)


def test_ipv6_address():
    result = get_addr_from_stream(3333, socket.SOCK_STREAM, io.StringIO("::1\n"))
    assert result.family == socket.AF_INET6
    assert result.ip_protocol == socket.IPPROTO_IPV6
    assert result.address[:2] == ("::1", 3333)


def test_resolution_failure():
    with mock.patch("socket.getaddrinfo", side_effect=socket.gaierror("no such host")):
        with pytest.raises(AddressError):
            get_addr_from_stream(80, socket.SOCK_STREAM, io.StringIO("nowhere.example.com\n"))


def test_no_usable_family():
    unix_only = [(socket.AF_UNIX, socket.SOCK_STREAM, 0, "", "/tmp/sock")]
    with mock.patch("socket.getaddrinfo", return_value=unix_only):
        with pytest.raises(AddressError):
            get_addr_from_stream(80, socket.SOCK_STREAM, io.StringIO("host.example.com\n"))


def test_first_matching_family_wins():
    results = [
        (socket.AF_INET6, socket.SOCK_STREAM, 6, "", ("::1", 0, 0, 0)),
        (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("127.0.0.1", 0)),
    ]
    with mock.patch("socket.getaddrinfo", return_value=results):
        result = get_addr_from_stream(21, socket.SOCK_STREAM, io.StringIO("dual.example.com\n"))
    assert result.family == socket.AF_INET6
    assert result.address == ("::1", 21, 0, 0)