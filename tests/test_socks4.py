import ipaddress

import pytest

from asionet.socks4 import VERSION, Command, Socks4Reply, Socks4Request, Status


def test_connect_request_wire_bytes():
    request = Socks4Request(Command.CONNECT, "10.0.0.1", 80, "")
    assert request.to_bytes() == b"\x04\x01\x00\x50\x0a\x00\x00\x01\x00"


def test_request_port_in_network_order():
    wire = Socks4Request(Command.BIND, "10.0.0.1", 0x1234).to_bytes()
    assert wire[0] == VERSION
    assert wire[1] == Command.BIND
    assert wire[2:4] == b"\x12\x34"


def test_request_carries_user_id():
    wire = Socks4Request(Command.CONNECT, "192.0.2.7", 1080, "user").to_bytes()
    assert wire[4:8] == ipaddress.IPv4Address("192.0.2.7").packed
    assert wire[8:] == b"user\x00"


def test_ipv6_endpoint_is_rejected():
    with pytest.raises(ValueError):
        Socks4Request(Command.CONNECT, "::1", 80)


def test_port_out_of_range_is_rejected():
    with pytest.raises(ValueError):
        Socks4Request(Command.CONNECT, "10.0.0.1", 70000)


def test_granted_reply():
    reply = Socks4Reply.from_bytes(bytes([0, Status.REQUEST_GRANTED, 0x1F, 0x90, 127, 0, 0, 1]))
    assert reply.success()
    assert reply.endpoint() == ("127.0.0.1", 0x1F90)


def test_failed_reply():
    reply = Socks4Reply.from_bytes(bytes([0, Status.REQUEST_FAILED, 0, 0, 0, 0, 0, 0]))
    assert not reply.success()
    assert reply.status == Status.REQUEST_FAILED


def test_nonzero_leading_byte_is_not_success():
    reply = Socks4Reply.from_bytes(bytes([4, Status.REQUEST_GRANTED, 0, 0, 0, 0, 0, 0]))
    assert not reply.success()


def test_default_reply_is_not_success():
    assert not Socks4Reply().success()


def test_short_reply_is_rejected():
    with pytest.raises(ValueError):
        Socks4Reply.from_bytes(b"\x00\x5a")