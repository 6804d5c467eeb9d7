"""
异常定义模块 (Exception Definitions)

Sender 在每个失败路径上抛出的异常类。调用方可以统一捕获 SenderError，
也可以按具体子类区分传输、协议、格式和注册失败。

Exception classes raised by the sender on every failure path. Callers may catch
SenderError for everything, or the concrete subclasses to tell transport,
protocol, format and registration failures apart.
"""
from typing import Optional


class SenderError(Exception):
    """发送异常基类 (Base Sender Exception)"""
    error: str = "sender_error"

    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class TransportError(SenderError):
    """连接、写入或读取失败，包括超时 (Connect / write / read failure, including timeouts)"""
    error = "transport_error"


class ProtocolError(SenderError):
    """响应帧头错误、长度不足或负载无法解析 (Bad header, short frame or unparseable payload)"""
    error = "protocol_error"


class FormatError(SenderError):
    """info 字段格式不符 (The info field does not have the expected shape)"""
    error = "format_error"


class RegistrationError(SenderError):
    """两次自动注册均返回 failed (Both auto-registration attempts reported failure)"""
    error = "registration_error"
