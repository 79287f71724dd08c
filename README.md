# asionet

Small asyncio networking building blocks that use only the standard library.

| Module                | What it holds                                                        |
|-----------------------|----------------------------------------------------------------------|
| `asionet.chat_message` | `ChatMessage` framing for a length-prefixed chat protocol, `HeaderError` |
| `asionet.socks4`      | `Socks4Request` / `Socks4Reply` wire formats, `Command`, `Status`    |
| `asionet.addr_input`  | `read_host`, `get_addr_from_stream`, `ResolvedAddress`, `AddressError` |
| `asionet.tcp_echo`    | A TCP echo server: `handle_client`, `serve`, `main`                  |
| `asionet.bio`         | `Bio` and `new_pair`: two linked, bounded in-memory byte buffers     |
| `asionet.tls_context` | `TlsContext`, `TlsMethod`, `Container`, `VerifyMode`, `TlsError`     |
| `asionet.engine`      | `Engine`, `Want`, `State`, `EngineError`, `impl_verify_mode`         |
| `asionet.ssl_demo`    | TLS echo server and one-shot client: `run_server`, `run_client`      |

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Commands

| Command            | What it does                                                   |
|--------------------|----------------------------------------------------------------|
| `asionet-tcp-echo` | TCP echo server. It prints each chunk it receives and sends it back |
| `asionet-ssl-demo` | TLS echo server, TLS client, or both                           |

`asionet-tcp-echo PORT [--host HOST]` listens on `HOST` (default `0.0.0.0`).

`asionet-ssl-demo` takes `--server` and/or `--client` (at least one is
required). It also takes `--host` (default `localhost`) and `--port`
(default 443). The server needs `--cert` and `--key`, both PEM files. The
client can pass `--verify-peer` and `--ca` to check the server certificate.
The server echoes whatever it receives. The client sends
`GET / HTTP/1.1\r\n\r\n` and prints `Reply: ` with as many bytes as it sent.

## Library use

### Chat framing

A frame is a 4-character, right-aligned decimal length header followed by a
body of at most 512 bytes. Longer bodies are cut short.

```python
from asionet.chat_message import ChatMessage, HeaderError

msg = ChatMessage(b"hi")
assert msg.to_bytes() == b"   2hi"
assert len(msg) == 6

incoming = ChatMessage()
incoming.decode_header(b"   5")    # returns 5
```

`decode_header` raises `HeaderError` for a negative length or one above 512.
In that case it sets `body_length` to 0.

### SOCKS4

`Socks4Request(Command.CONNECT, "10.0.0.1", 80).to_bytes()` gives the
request: version, command, port (big endian), IPv4 address, user id and a
terminating NUL. A non-IPv4 address or an out-of-range port raises
`ValueError`. `Socks4Reply.from_bytes(data)` parses an 8-byte reply and
raises `ValueError` for any other length. `success()` holds when the first
byte is 0 and the status is `Status.REQUEST_GRANTED`. `endpoint()` returns
`(address, port)`.

### Reading an address

`get_addr_from_stream(port, sock_type, stream)` reads the first non-blank
line from `stream` (default: stdin) and resolves it with `getaddrinfo`. It
returns a `ResolvedAddress` for the first IPv4 or IPv6 result. It raises
`AddressError` at end of input, when resolution fails, or when no such
address is found.

### Linked buffers

```python
from asionet.bio import new_pair

left, right = new_pair(1024)
left.write(b"hello")
assert right.read(5) == b"hello"
```

A write into a full buffer raises `BlockingIOError` and sets
`should_write()`. A read when the peer has nothing pending does the same
and sets `should_read()`.

### TLS engine

`Engine(TlsContext(...))` runs TLS over buffers only. It does this with the
standard library `ssl` module and a bio pair.

- `put_input(data)` hands over encrypted bytes from the peer. It returns
  the part that did not fit.
- `get_output(size)` takes encrypted bytes to send.
- `handshake(client)` and `shutdown()` return a `Want`.
- `write(data)` returns `(Want, bytes_taken)`.
- `read(size)` returns `(Want, data)`.

TLS failures raise `EngineError`, a `TlsError` that carries a code and a
`want`. A read on a closed stream raises `EOFError`.

## What this package does not do

It has no chat server or chat client: only the message framing is provided.
It has no UDP echo server. It does not send HTTP requests. It does not open
connections through a SOCKS4 proxy, since `asionet.socks4` only encodes and
decodes the messages.