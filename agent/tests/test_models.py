"""数据模型与 info 解析单元测试。"""
from datetime import timedelta

import pytest
from pydantic import ValidationError

from zabbix_sender.exceptions import FormatError
from zabbix_sender.models import (
    Metric,
    Packet,
    RequestType,
    Response,
    ResponseInfo,
    new_metric,
    new_packet,
    parse_info,
)


class TestMetric:
    def test_value_coerced_to_str(self):
        m = new_metric("h", "k", 13)
        assert m.value == "13"
        assert m.clock is None
        assert m.active is False

    def test_item_has_no_active_field(self):
        item = new_metric("h", "k", "v", active=True, clock=10).to_item()
        assert item.model_dump() == {"host": "h", "key": "k", "value": "v", "clock": 10}

    def test_immutable(self):
        m = Metric(host="h", key="k", value="v")
        with pytest.raises(AttributeError):
            m.value = "x"

    def test_zero_clock_is_kept(self):
        packet = new_packet([new_metric("h", "k", "v", clock=0)])
        assert b'"clock":0' in packet.to_json()


class TestPacket:
    def test_request_type_by_path(self):
        assert new_packet([], active=True).request == RequestType.AGENT_DATA
        assert new_packet([], active=False).request == RequestType.SENDER_DATA

    def test_unset_fields_omitted(self):
        assert new_packet([]).to_json() == b'{"request":"sender data","data":[]}'

    def test_registration_requires_host(self):
        with pytest.raises(ValidationError):
            Packet(request=RequestType.ACTIVE_CHECKS)

    def test_registration_rejects_data(self):
        with pytest.raises(ValidationError):
            Packet(request="active checks", host="h", data=[])

    def test_metric_packet_rejects_host_fields(self):
        with pytest.raises(ValidationError):
            Packet(request="sender data", data=[], host="h")

    def test_unknown_request(self):
        with pytest.raises(ValidationError):
            Packet(request="proxy data", data=[])


class TestParseInfo:
    def test_sample(self):
        info = parse_info("processed: 1; failed: 0; total: 1; seconds spent: 0.000030")
        assert info == ResponseInfo(processed=1, failed=0, total=1, spent_ns=30000)
        assert info.spent == timedelta(microseconds=30)

    def test_key_order_not_assumed(self):
        info = parse_info("total: 5;seconds spent: 1.5; failed: 2 ; processed: 3")
        assert (info.processed, info.failed, info.total) == (3, 2, 5)
        assert info.spent_ns == 1_500_000_000

    def test_unknown_key_ignored(self):
        info = parse_info("processed: 4; failed: 0; skipped: 9; seconds spent: 0.1")
        assert info.processed == 4
        assert info.total == 0

    def test_too_few_segments(self):
        with pytest.raises(FormatError, match="Expected 4 segments"):
            parse_info("processed: 1; failed: 0; total: 1")

    def test_too_many_segments(self):
        with pytest.raises(FormatError):
            parse_info("processed: 1; failed: 0; total: 1; seconds spent: 0.1;")

    def test_segment_without_colon(self):
        with pytest.raises(FormatError):
            parse_info("processed 1; failed: 0; total: 1; seconds spent: 0.1")

    def test_bad_integer(self):
        with pytest.raises(FormatError, match=r"processed value \[one\]"):
            parse_info("processed: one; failed: 0; total: 1; seconds spent: 0.1")

    @pytest.mark.parametrize("value", ["\u0661\u0662", "1_000", "1.0", "+", ""])
    def test_integer_must_be_ascii_digits(self, value):
        with pytest.raises(FormatError):
            parse_info(f"processed: {value}; failed: 0; total: 1; seconds spent: 0.1")

    def test_signed_integer(self):
        assert parse_info("processed: +3; failed: -1; total: 2; seconds spent: 0").failed == -1

    def test_bad_float(self):
        with pytest.raises(FormatError, match="seconds spent"):
            parse_info("processed: 1; failed: 0; total: 1; seconds spent: fast")


class TestResponseGetInfo:
    def test_null_info_is_empty(self):
        assert Response.model_validate_json(b'{"response": "success", "info": null}').info == ""

    def test_success(self):
        res = Response(response="success", info="processed: 2; failed: 1; total: 3; seconds spent: 0.000100")
        assert res.get_info().failed == 1

    def test_not_success(self):
        res = Response(response="failed", info="processed: 1; failed: 0; total: 1; seconds spent: 0.1")
        with pytest.raises(FormatError, match="not success"):
            res.get_info()
