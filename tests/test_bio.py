import pytest

from asionet.bio import Bio, new_pair


def test_pair_peers_each_other():
    a, b = new_pair(64)
    assert a.peer is b
    assert b.peer is a


def test_write_then_peer_read_round_trip():
    a, b = new_pair(64)
    assert a.write(b"hello") == 5
    assert a.wpending() == 5
    assert b.ctrl_pending() == 5
    assert b.read(5) == b"hello"
    assert a.wpending() == 0
    assert b.ctrl_pending() == 0


def test_partial_read_keeps_rest_in_order():
    a, b = new_pair(64)
    a.write(b"abcdef")
    assert b.read(2) == b"ab"
    assert b.ctrl_pending() == 4
    assert b.read(100) == b"cdef"


def test_short_read_sets_read_flag_only_when_blocked():
    a, b = new_pair(64)
    a.write(b"xy")
    b.read(10)
    assert b.should_read() is False
    with pytest.raises(BlockingIOError):
        b.read(1)
    assert b.should_read() is True
    a.write(b"z")
    assert b.read(1) == b"z"
    assert b.should_read() is False


def test_write_truncates_to_capacity():
    a, _b = new_pair(4)
    assert a.write(b"abcdef") == 4
    assert a.wpending() == 4
    assert a.should_write() is False


def test_full_buffer_blocks_and_sets_flag():
    a, b = new_pair(4)
    a.write(b"abcd")
    with pytest.raises(BlockingIOError):
        a.write(b"e")
    assert a.should_write() is True
    assert b.read(4) == b"abcd"
    assert a.write(b"e") == 1
    assert a.should_write() is False


def test_empty_operations_are_noops():
    a, b = new_pair(8)
    assert a.write(b"") == 0
    assert b.read(0) == b""
    assert a.should_write() is False
    assert b.should_read() is False


def test_unpaired_bio_cannot_read():
    bio = Bio(8)
    with pytest.raises(RuntimeError):
        bio.read(1)


def test_invalid_size_rejected():
    with pytest.raises(ValueError):
        Bio(0)


def test_traffic_in_both_directions_is_independent():
    a, b = new_pair(16)
    a.write(b"ping")
    b.write(b"pong")
    assert a.read(4) == b"pong"
    assert b.read(4) == b"ping"