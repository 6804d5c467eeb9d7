"""
Zabbix Sender 测试基础配置

提供本地假 Zabbix 服务端 fixture，所有网络测试只连接 127.0.0.1 的临时端口。
"""
import socket

import pytest

from fake_zabbix import FakeZabbix
from zabbix_sender import Sender


@pytest.fixture
def fake_zabbix():
    """启动假服务端：fake_zabbix(reply1, reply2, ...)，每个 reply 对应一次连接。"""
    servers = []

    def _start(*replies):
        srv = FakeZabbix(replies).start()
        servers.append(srv)
        return srv

    yield _start
    for srv in servers:
        srv.close()


@pytest.fixture
def sender_for():
    """为假服务端创建使用短超时的 Sender。"""
    def _make(srv, **kwargs):
        kwargs.setdefault("connect_timeout", 2)
        kwargs.setdefault("read_timeout", 2)
        kwargs.setdefault("write_timeout", 2)
        return Sender(srv.host, srv.port, **kwargs)
    return _make


@pytest.fixture
def closed_port():
    """一个当前无人监听的本地端口。"""
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port


@pytest.fixture
def silent_listener():
    """接受连接但从不读取数据的端口（内核 backlog 完成握手），用于写超时测试。"""
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    s.listen(1)
    yield s.getsockname()[1]
    s.close()
