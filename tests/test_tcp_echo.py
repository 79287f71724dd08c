import asyncio

import pytest

from asionet.tcp_echo import MAX_LENGTH, main, serve


async def _connect(server):
    port = server.sockets[0].getsockname()[1]
    return await asyncio.open_connection("127.0.0.1", port)


@pytest.mark.asyncio
async def test_echoes_data_back():
    server = await serve("127.0.0.1", 0)
    async with server:
        reader, writer = await _connect(server)
        writer.write(b"ping")
        await writer.drain()
        echoed = await reader.readexactly(4)
        writer.close()
        await writer.wait_closed()
    assert echoed == b"ping"


@pytest.mark.asyncio
async def test_echoes_several_messages_in_order():
    server = await serve("127.0.0.1", 0)
    async with server:
        reader, writer = await _connect(server)
        for payload in (b"one", b"two", b"three"):
            writer.write(payload)
            await writer.drain()
            assert await reader.readexactly(len(payload)) == payload
        writer.close()
        await writer.wait_closed()


@pytest.mark.asyncio
async def test_large_payload_round_trips():
    payload = bytes(range(256)) * ((MAX_LENGTH * 3) // 256)
    server = await serve("127.0.0.1", 0)
    async with server:
        reader, writer = await _connect(server)
        writer.write(payload)
        await writer.drain()
        echoed = await reader.readexactly(len(payload))
        writer.close()
        await writer.wait_closed()
    assert echoed == payload


@pytest.mark.asyncio
async def test_received_text_is_printed(capsys):
    server = await serve("127.0.0.1", 0)
    async with server:
        reader, writer = await _connect(server)
        writer.write(b"hello")
        await writer.drain()
        await reader.readexactly(5)
        writer.close()
        await writer.wait_closed()
    assert "hello" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_server_closes_after_client_eof():
    server = await serve("127.0.0.1", 0)
    async with server:
        reader, writer = await _connect(server)
        writer.write_eof()
        rest = await reader.read()
        writer.close()
        await writer.wait_closed()
    assert rest == b""


def test_main_rejects_bad_port():
    with pytest.raises(SystemExit):
        main(["not-a-port"])