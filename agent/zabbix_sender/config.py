"""
Sender 配置加载模块。

定义采集端连接配置，并从 YAML 文件加载。
支持时间简写（如 '500ms'、'5s'、'1m'）和 "host:port" 形式的地址。
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import yaml

DEFAULT_PORT = 10051
DEFAULT_CONNECT_TIMEOUT = 5.0
DEFAULT_READ_TIMEOUT = 15.0
DEFAULT_WRITE_TIMEOUT = 5.0


@dataclass
class SenderConfig:
    """采集端（Zabbix server / proxy）连接配置。"""
    host: str = "localhost"
    port: int = DEFAULT_PORT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT  # 秒
    read_timeout: float = DEFAULT_READ_TIMEOUT
    write_timeout: float = DEFAULT_WRITE_TIMEOUT


def _parse_duration(val: Union[int, float, str]) -> float:
    """解析时间，支持数字（秒）及 '500ms'、'15s'、'1m' 等简写格式。"""
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        return float(val)
    s = str(val).strip().lower()
    if s.endswith("ms"):
        return float(s[:-2]) / 1000
    if s.endswith("s"):
        return float(s[:-1])
    if s.endswith("m"):
        return float(s[:-1]) * 60
    return float(s)


def load_config(path: str) -> SenderConfig:
    """从 YAML 文件加载 Sender 配置。

    配置项可以放在 ``server:`` 段下，也可以直接放在顶层。

    Args:
        path: 配置文件路径。

    Returns:
        解析后的 SenderConfig 实例。

    Raises:
        FileNotFoundError: 配置文件不存在时抛出。
        ValueError: 端口或时间格式错误。
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(p) as f:
        data = yaml.safe_load(f) or {}

    srv = data.get("server") or data
    cfg = SenderConfig()

    # "address: host:port" 简写
    address = srv.get("address", "")
    if address:
        host, sep, port = str(address).rpartition(":")
        if sep:
            cfg.host = host
            cfg.port = int(port)
        else:
            cfg.host = port

    cfg.host = srv.get("host", cfg.host)
    cfg.port = int(srv.get("port", cfg.port))

    cfg.connect_timeout = _parse_duration(srv.get("connect_timeout", cfg.connect_timeout))
    cfg.read_timeout = _parse_duration(srv.get("read_timeout", cfg.read_timeout))
    cfg.write_timeout = _parse_duration(srv.get("write_timeout", cfg.write_timeout))

    return cfg
