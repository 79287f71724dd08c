"""TLS echo server and a client that sends one request and prints the reply."""

from __future__ import annotations

import argparse
import asyncio
import ssl
import sys
import tempfile
from pathlib import Path

from asionet.tls_context import (
    DEFAULT_WORKAROUNDS,
    NO_SSLV2,
    Container,
    TlsContext,
    TlsMethod,
)

MAX_LENGTH = 1024
DEFAULT_PORT = 443
DEFAULT_REQUEST = b"GET / HTTP/1.1\r\n\r\n"


def _load_cert_chain(ssl_context: ssl.SSLContext, chain: bytes, key: bytes) -> None:
    with tempfile.TemporaryDirectory() as directory:
        cert_path = Path(directory) / "cert.pem"
        key_path = Path(directory) / "key.pem"
        cert_path.write_bytes(chain)
        key_path.write_bytes(key)
        ssl_context.load_cert_chain(cert_path, key_path)


def build_server_context(context: TlsContext) -> ssl.SSLContext:
    """Configure ``context`` for serving and return the matching SSL context.

    Raises ValueError when the certificate chain or private key is missing.
    """
    context.set_options(DEFAULT_WORKAROUNDS | NO_SSLV2)
    if not context.size(Container.CERT) or not context.size(Container.PRIVKEY):
        raise ValueError("server needs a certificate chain and a private key")
    ssl_context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    _load_cert_chain(
        ssl_context, context.data(Container.CERT), context.data(Container.PRIVKEY)
    )
    return ssl_context


def build_client_context(context: TlsContext, verify_peer: bool = False) -> ssl.SSLContext:
    """Return a client SSL context; with ``verify_peer`` the server must be trusted."""
    ssl_context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    ssl_context.check_hostname = False
    if verify_peer:
        ssl_context.verify_mode = ssl.CERT_REQUIRED
        if context.size(Container.CA_CERT):
            ssl_context.load_verify_locations(
                cadata=context.data(Container.CA_CERT).decode("ascii")
            )
    else:
        ssl_context.verify_mode = ssl.CERT_NONE
    return ssl_context


async def _serve_session(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    try:
        while True:
            data = await reader.read(MAX_LENGTH)
            if not data:
                break
            print("Server received: " + data.decode("utf-8", "replace"), flush=True)
            writer.write(data)
            await writer.drain()
    except (ConnectionError, ssl.SSLError):
        pass
    finally:
        writer.close()


async def run_server(
    context: ssl.SSLContext, host: str = "0.0.0.0", port: int = DEFAULT_PORT
) -> asyncio.AbstractServer:
    """Start a TLS echo server and return it."""
    return await asyncio.start_server(_serve_session, host, port, ssl=context)


async def run_client(
    context: ssl.SSLContext,
    host: str,
    port: int = DEFAULT_PORT,
    request: bytes = DEFAULT_REQUEST,
) -> bytes:
    """Connect, send ``request`` and return as many reply bytes as were sent.

    Raises OSError (including ssl.SSLError) when connecting, the handshake,
    or the exchange fails.
    """
    reader, writer = await asyncio.open_connection(host, port, ssl=context)
    try:
        writer.write(request)
        await writer.drain()
        try:
            return await reader.readexactly(len(request))
        except asyncio.IncompleteReadError as exc:
            raise ConnectionError("Read failed: connection closed early") from exc
    finally:
        writer.close()


async def _run(args: argparse.Namespace) -> None:
    server = None
    if args.server:
        tls = TlsContext(TlsMethod.TLS_SERVER)
        tls.use_certificate_chain(Path(args.cert).read_bytes() if args.cert else b"")
        tls.use_private_key(Path(args.key).read_bytes() if args.key else b"")
        server = await run_server(build_server_context(tls), "0.0.0.0", args.port)
        await asyncio.sleep(1)
    try:
        if args.client:
            tls = TlsContext(TlsMethod.TLS_CLIENT)
            if args.verify_peer and args.ca:
                tls.add_certificate_authority(Path(args.ca).read_bytes())
            reply = await run_client(
                build_client_context(tls, args.verify_peer), args.host, args.port
            )
            print("Reply: " + reply.decode("utf-8", "replace"), flush=True)
        if server is not None:
            await server.serve_forever()
    finally:
        if server is not None:
            server.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="asionet-ssl", description="TLS echo server and request client."
    )
    parser.add_argument("--server", action="store_true", help="run the echo server")
    parser.add_argument("--client", action="store_true", help="run the client")
    parser.add_argument("--host", default="localhost", help="server to connect to")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--cert", help="server certificate chain (PEM)")
    parser.add_argument("--key", help="server private key (PEM)")
    parser.add_argument("--ca", help="certificate authority for the client (PEM)")
    parser.add_argument("--verify-peer", action="store_true")
    args = parser.parse_args(argv)
    if not (args.server or args.client):
        parser.error("choose --server, --client or both")
    try:
        asyncio.run(_run(args))
    except KeyboardInterrupt:
        pass
    except (OSError, ValueError) as exc:
        print(f"failed: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())