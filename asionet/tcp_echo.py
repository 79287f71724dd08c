"""TCP echo server: every chunk received is printed and sent back."""

from __future__ import annotations

import argparse
import asyncio
import sys

MAX_LENGTH = 1024


async def handle_client(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    """Echo data back to one client until it disconnects."""
    try:
        while True:
            data = await reader.read(MAX_LENGTH)
            if not data:
                break
            print(data.split(b"\0", 1)[0].decode("utf-8", "replace"), flush=True)
            writer.write(data)
            await writer.drain()
    except ConnectionError:
        pass
    finally:
        writer.close()


async def serve(host: str = "0.0.0.0", port: int = 0) -> asyncio.AbstractServer:
    """Start the echo server and return it."""
    return await asyncio.start_server(handle_client, host, port)


async def _run(host: str, port: int) -> None:
    server = await serve(host, port)
    print("ASIO engine is up and running", flush=True)
    async with server:
        await server.serve_forever()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="asionet-tcp-echo", description="TCP echo server.")
    parser.add_argument("port", type=int, help="port to listen on")
    parser.add_argument("--host", default="0.0.0.0", help="address to bind")
    args = parser.parse_args(argv)
    try:
        asyncio.run(_run(args.host, args.port))
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())