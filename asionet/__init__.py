"""Asyncio networking pieces: chat framing, SOCKS4 messages, address input, a TCP echo server, and TLS over in-memory buffers."""

__version__ = "0.1.0"