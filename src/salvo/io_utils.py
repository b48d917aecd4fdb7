# io_utils.py
"""
Line transport shared by GameSession and the CLI
–––––––––––––––––––––––––––––––––––––––––––––––––
• LineChannel.send()    – write one UTF-8 line and flush
• LineChannel.receive() – next line, None on clean EOF, TransportFailure on
                          timeout / socket error, ProtocolError on bytes
                          that are not UTF-8
• listen() / dial()     – establish the single peer connection
"""

from __future__ import annotations

import logging
import socket
import time
from typing import Optional

from . import config as _cfg
from .messages import ProtocolError

logger = logging.getLogger("salvo.io_utils")

ENCODING = "utf-8"
_RECV_CHUNK = 4096


class TransportFailure(Exception):
    """Raised when reading from or writing to the peer fails."""


class LineChannel:
    """Newline-framed text over a connected socket.

    Lines are assembled from raw ``recv`` calls rather than ``makefile`` so a
    timed-out read leaves the channel usable for the next attempt.
    """

    def __init__(self, sock: socket.socket, *, timeout: Optional[float] = _cfg.TIMEOUT) -> None:
        self.sock = sock
        self.sock.settimeout(timeout)
        self._buffer = b""
        self._eof = False

    def send(self, line: str) -> None:
        logger.debug("send() – %r", line)
        try:
            self.sock.sendall((line + "\n").encode(ENCODING))
        except OSError as e:
            raise TransportFailure(f"send failed: {e}") from e

    def receive(self) -> Optional[str]:
        """Block for the next line (without its newline); None once the peer has closed."""
        while b"\n" not in self._buffer:
            if self._eof:
                return self._drain()
            try:
                chunk = self.sock.recv(_RECV_CHUNK)
            except socket.timeout as e:
                raise TransportFailure("timed out waiting for peer") from e
            except OSError as e:
                raise TransportFailure(f"receive failed: {e}") from e
            if not chunk:
                self._eof = True
                continue
            self._buffer += chunk
        raw, self._buffer = self._buffer.split(b"\n", 1)
        return self._decode(raw)

    def _drain(self) -> Optional[str]:
        # A final line without its newline still counts.
        raw, self._buffer = self._buffer, b""
        if not raw.strip():
            logger.debug("receive() – peer closed the stream")
            return None
        return self._decode(raw)

    def _decode(self, raw: bytes) -> str:
        try:
            line = raw.decode(ENCODING).rstrip("\r")
        except UnicodeDecodeError as e:
            raise ProtocolError(f"undecodable line: {raw!r}") from e
        logger.debug("receive() – %r", line)
        return line

    def close(self) -> None:
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # already disconnected
        self.sock.close()


def listen(host: str, port: int) -> socket.socket:
    """Accept exactly one peer on *host*:*port*."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server_sock:
        server_sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        server_sock.bind((host, port))
        server_sock.listen(1)
        logger.info("Waiting for opponent on %s:%d", host, port)
        conn, addr = server_sock.accept()
    logger.info("Connection from %s", addr)
    return conn


def dial(host: str, port: int, *, retry_delay: float = 1.0, attempts: Optional[int] = None) -> socket.socket:
    """Connect to the listening peer, retrying until it is up (or *attempts* run out)."""
    tries = 0
    while True:
        tries += 1
        try:
            sock = socket.create_connection((host, port))
            logger.info("Connected to %s:%d", host, port)
            return sock
        except (ConnectionRefusedError, OSError) as e:
            if attempts is not None and tries >= attempts:
                raise TransportFailure(f"could not reach {host}:{port}: {e}") from e
            logger.info("Opponent not ready at %s:%d, retrying in %.0fs…", host, port, retry_delay)
            time.sleep(retry_delay)
