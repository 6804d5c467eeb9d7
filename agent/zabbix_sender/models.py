"""
数据模型模块。

领域对象 Metric 只在内存中携带 active 标记；发送到网络上的是不含该字段的
MetricItem / Packet（Pydantic 模型）。Response 是采集端返回的 JSON，
ResponseInfo 则由指标上报响应的 info 文本解析而来。
"""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from zabbix_sender.exceptions import FormatError

RESPONSE_SUCCESS = "success"
RESPONSE_FAILED = "failed"

INFO_SEGMENTS = 4
_INT_RE = re.compile(r"[+-]?[0-9]+")


class RequestType(str, enum.Enum):
    """请求类型，决定 Packet 中哪些字段有意义。"""
    AGENT_DATA = "agent data"
    SENDER_DATA = "sender data"
    ACTIVE_CHECKS = "active checks"


@dataclass(frozen=True)
class Metric:
    """A single item value.

    ``active`` selects the data path (agent active item vs. trapper item) and
    is only used to batch metrics locally; :class:`MetricItem` has no such
    field, so it can never be encoded.
    """
    host: str
    key: str
    value: str
    clock: Optional[int] = None
    active: bool = False

    def __post_init__(self):
        if not isinstance(self.value, str):
            object.__setattr__(self, "value", str(self.value))

    def to_item(self) -> MetricItem:
        return MetricItem(host=self.host, key=self.key, value=self.value, clock=self.clock)


class MetricItem(BaseModel):
    """Wire form of a metric inside ``Packet.data``."""
    model_config = ConfigDict(frozen=True)

    host: str
    key: str
    value: str
    clock: Optional[int] = None


class Packet(BaseModel):
    """请求负载。metric 上报使用 data，自动注册使用 host / host_metadata。"""
    model_config = ConfigDict(frozen=True)

    request: RequestType
    data: Optional[List[MetricItem]] = None
    clock: Optional[int] = None
    host: Optional[str] = None
    host_metadata: Optional[str] = None

    @model_validator(mode="after")
    def check_shape(self) -> Packet:
        if self.request == RequestType.ACTIVE_CHECKS:
            if self.host is None:
                raise ValueError("'active checks' request requires a host")
            if self.data is not None:
                raise ValueError("'active checks' request carries no data")
        else:
            if self.data is None:
                raise ValueError(f"'{self.request.value}' request requires data")
            if self.host is not None or self.host_metadata is not None:
                raise ValueError(f"'{self.request.value}' request carries no host fields")
        return self

    @classmethod
    def registration(cls, host: str, host_metadata: str) -> Packet:
        return cls(request=RequestType.ACTIVE_CHECKS, host=host, host_metadata=host_metadata)

    def to_json(self) -> bytes:
        """Serialise to compact UTF-8 JSON, leaving out unset fields."""
        return self.model_dump_json(exclude_none=True).encode("utf-8")


def new_metric(host: str, key: str, value: Any, active: bool = False,
               clock: Optional[int] = None) -> Metric:
    """Build a Metric; ``active`` should be True for Zabbix agent (active) items."""
    return Metric(host=host, key=key, value=value, clock=clock, active=active)


def new_packet(metrics: Sequence[Metric], active: bool = False,
               clock: Optional[int] = None) -> Packet:
    """Build a metric packet: "agent data" for active items, "sender data" otherwise."""
    request = RequestType.AGENT_DATA if active else RequestType.SENDER_DATA
    return Packet(request=request, data=[m.to_item() for m in metrics], clock=clock)


@dataclass(frozen=True)
class ResponseInfo:
    """指标上报响应中 info 字段的解析结果。"""
    processed: int = 0
    failed: int = 0
    total: int = 0
    spent_ns: int = 0

    @property
    def spent(self) -> timedelta:
        return timedelta(microseconds=self.spent_ns / 1000)


class Response(BaseModel):
    """采集端返回的 JSON。

    ``info`` is semi-structured text for metric uploads; a successful
    registration answers with the active-check list in ``data`` instead.
    """
    response: str
    info: str = ""
    data: Optional[List[Dict[str, Any]]] = None

    @field_validator("info", mode="before")
    @classmethod
    def null_info(cls, v):
        return "" if v is None else v

    @property
    def success(self) -> bool:
        return self.response == RESPONSE_SUCCESS

    def get_info(self) -> ResponseInfo:
        if not self.success:
            raise FormatError(
                "Can not process info if response not success",
                detail=f"response={self.response!r}",
            )
        return parse_info(self.info)


def parse_info(info: str) -> ResponseInfo:
    """解析 "processed: 1; failed: 0; total: 1; seconds spent: 0.000030"。

    Key order is not assumed; unknown keys are skipped.

    Raises:
        FormatError: 段数不是 4、某段不是 key: value 形式，或数值无法解析。
    """
    segments = info.split(";")
    if len(segments) != INFO_SEGMENTS:
        raise FormatError(
            f"Expected {INFO_SEGMENTS} segments in info, got {len(segments)}",
            detail=info,
        )

    values = {}
    for segment in segments:
        parts = segment.split(":")
        if len(parts) != 2:
            raise FormatError(f"Expected 'key: value' in info segment, got {len(parts)} parts", detail=segment)
        key = parts[0].strip()
        value = parts[1].strip()

        if key in ("processed", "failed", "total"):
            # optional sign + ASCII digits
            if not _INT_RE.fullmatch(value):
                raise FormatError(f"Error parsing {key} value [{value}]", detail="not an integer")
            values[key] = int(value)
        elif key == "seconds spent":
            try:
                values["spent_ns"] = round(float(value) * 1e9)
            except (ValueError, OverflowError) as exc:
                raise FormatError(f"Error parsing seconds spent value [{value}]", detail=str(exc)) from exc

    return ResponseInfo(**values)
