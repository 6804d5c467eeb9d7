"""Zabbix sender - pushes item values to a Zabbix server/proxy and registers hosts."""
import logging
import socket
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional

from zabbix_sender.config import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_PORT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_WRITE_TIMEOUT,
    SenderConfig,
)
from zabbix_sender.exceptions import RegistrationError, SenderError, TransportError
from zabbix_sender.models import RESPONSE_FAILED, Metric, Packet, Response, new_packet
from zabbix_sender.protocol import decode_response, encode_frame

logger = logging.getLogger(__name__)

RECV_CHUNK = 4096


@dataclass(frozen=True)
class SendOutcome:
    """Result of one attempted exchange: exactly one of response / error is set."""
    response: Optional[Response] = None
    error: Optional[SenderError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> Response:
        if self.error is not None:
            raise self.error
        return self.response


@dataclass(frozen=True)
class MetricsResult:
    """Outcome per data path; ``None`` means no metrics of that kind were given."""
    active: Optional[SendOutcome] = None
    trapper: Optional[SendOutcome] = None


class Sender:
    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        write_timeout: float = DEFAULT_WRITE_TIMEOUT,
    ):
        self.host = host
        self.port = port
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout

    @classmethod
    def from_config(cls, config: SenderConfig) -> "Sender":
        return cls(
            config.host,
            config.port,
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
            write_timeout=config.write_timeout,
        )

    def _write(self, conn: socket.socket, frame: bytes):
        # sendall() treats the socket timeout as a budget for the whole call
        conn.settimeout(self.write_timeout)
        try:
            conn.sendall(frame)
        except OSError as e:
            raise TransportError(f"sending the data (timeout={self.write_timeout}s)", detail=str(e)) from e

    def _read(self, conn: socket.socket) -> bytes:
        """Read until the server closes the connection or the read deadline passes."""
        deadline = time.monotonic() + self.read_timeout
        chunks: List[bytes] = []
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TransportError(
                    f"reading the response (timeout={self.read_timeout}s)", detail="deadline exceeded"
                )
            conn.settimeout(remaining)
            try:
                chunk = conn.recv(RECV_CHUNK)
            except OSError as e:
                raise TransportError(f"reading the response (timeout={self.read_timeout}s)", detail=str(e)) from e
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    def send(self, packet: Packet) -> Response:
        """Connect, send one packet, read the reply and close the connection.

        Raises:
            TransportError: connect, write or read failed (timeouts included).
            ProtocolError: the reply is not a valid response frame.
        """
        frame = encode_frame(packet)
        try:
            conn = socket.create_connection((self.host, self.port), timeout=self.connect_timeout)
        except OSError as e:
            raise TransportError(
                f"connecting to server {self.host}:{self.port} (timeout={self.connect_timeout}s)",
                detail=str(e),
            ) from e

        with conn:
            self._write(conn, frame)
            logger.debug(f"Sent {len(frame)} bytes ({packet.request.value}) to {self.host}:{self.port}")
            raw = self._read(conn)
            logger.debug(f"Received {len(raw)} bytes from {self.host}:{self.port}")

        return decode_response(raw)

    def _attempt(self, packet: Packet) -> SendOutcome:
        try:
            return SendOutcome(response=self.send(packet))
        except SenderError as e:
            logger.warning(f"Sending {packet.request.value} failed: {e}")
            return SendOutcome(error=e)

    def send_metrics(self, metrics: Iterable[Metric]) -> MetricsResult:
        """Send metrics, one packet for trapper items and one for active items.

        Trapper items go first. Each packet uses its own connection and a
        failure in one does not affect the other.
        """
        trapper_metrics = []
        active_metrics = []
        for m in metrics:
            if m.active:
                active_metrics.append(m)
            else:
                trapper_metrics.append(m)

        trapper = active = None
        if trapper_metrics:
            trapper = self._attempt(new_packet(trapper_metrics, active=False))
        if active_metrics:
            active = self._attempt(new_packet(active_metrics, active=True))

        return MetricsResult(active=active, trapper=trapper)

    def register_host(self, host: str, host_metadata: str) -> Response:
        """Register a host through the auto-registration ("active checks") request.

        The server answers "failed" the first time it sees a new host, so a
        second identical request is sent before giving up. Transport and
        protocol errors are raised as they are.

        Raises:
            RegistrationError: the second attempt still reports "failed".
        """
        packet = Packet.registration(host, host_metadata)

        res = self.send(packet)
        if res.success:
            logger.info(f"Host {host} registered")
            return res

        logger.warning(f"Autoregistration of {host} returned {res.response!r}, retrying")
        res = self.send(packet)
        if res.response == RESPONSE_FAILED:
            raise RegistrationError("autoregistration failed, verify hostmetadata", detail=res.info or None)

        logger.info(f"Host {host} registered on second attempt")
        return res
