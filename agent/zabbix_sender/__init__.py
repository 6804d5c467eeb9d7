"""Zabbix Sender - Zabbix sender protocol client (trapper / active items, auto-registration)."""
__version__ = "0.1.0"

from zabbix_sender.config import SenderConfig, load_config
from zabbix_sender.exceptions import (
    FormatError,
    ProtocolError,
    RegistrationError,
    SenderError,
    TransportError,
)
from zabbix_sender.models import (
    Metric,
    MetricItem,
    Packet,
    RequestType,
    Response,
    ResponseInfo,
    new_metric,
    new_packet,
    parse_info,
)
from zabbix_sender.protocol import HEADER, data_len, decode_response, encode_frame
from zabbix_sender.sender import MetricsResult, SendOutcome, Sender

__all__ = [
    "Sender",
    "SendOutcome",
    "MetricsResult",
    "SenderConfig",
    "load_config",
    "Metric",
    "MetricItem",
    "Packet",
    "RequestType",
    "Response",
    "ResponseInfo",
    "new_metric",
    "new_packet",
    "parse_info",
    "HEADER",
    "data_len",
    "encode_frame",
    "decode_response",
    "SenderError",
    "TransportError",
    "ProtocolError",
    "FormatError",
    "RegistrationError",
]
