"""
Tests for JsonDiagLogger.

Covers:
- The five DiagLogger methods
- Wire format (key order, single line, UTF-8 text)
- Gate behaviour with floors and OFF overrides
- First incoming request reporting
- Option replacement (no merge)
- Sinks and sink failures
- Status
"""

import io
import json

import pytest
from pydantic import ValidationError

from jsondiag.config import LoggerOptions
from jsondiag.core import DiagLogger, JsonDiagLogger
from jsondiag.formatters import JsonFormatter
from jsondiag.records import LogEntryInput, LogLevel, LogRecord
from jsondiag.sinks import LineSink, ListSink, StreamSink

TS = "2026-02-12T14:32:05.123Z"
MARKER = "http instrumentation incomingRequest"
BASE = {"logger_name": "test-logger", "service_name": "test-service"}


def make_logger(**overrides) -> tuple[JsonDiagLogger, ListSink]:
    sink = ListSink()
    log = JsonDiagLogger({**BASE, **overrides}, sink=sink, clock=lambda: TS)
    return log, sink


def parsed(sink: ListSink) -> list[dict]:
    return [json.loads(line) for line in sink.lines]


# ═══════════════════════════════════════════════════════════════════
#  DiagLogger interface
# ═══════════════════════════════════════════════════════════════════

class TestInterface:
    def test_is_diag_logger(self):
        log, _ = make_logger()
        assert isinstance(log, DiagLogger)

    def test_each_method_emits_once(self):
        log, sink = make_logger()
        log.debug("test", 1, {"name": "myname"})
        assert sink.count == 1
        log.verbose("test", 1, {"name": "myname"})
        assert sink.count == 2
        log.info("test", 1, {"name": "myname"})
        assert sink.count == 3
        log.error("test", 1, {"name": "myname"})
        assert sink.count == 4
        log.warn("test", 1, {"name": "myname"})
        assert sink.count == 5

        assert [r["level"] for r in parsed(sink)] == ["DEBUG", "VERBOSE", "INFO", "ERROR", "WARN"]

    def test_message_may_be_absent(self):
        log, sink = make_logger()
        log.info()
        assert parsed(sink)[0]["message"] == "undefined. Log arguments are: []"


# ═══════════════════════════════════════════════════════════════════
#  Wire format
# ═══════════════════════════════════════════════════════════════════

class TestWireFormat:
    def test_key_order_and_values(self):
        log, sink = make_logger()
        log.warn("hello", 1)
        [line] = sink.lines
        record = json.loads(line)
        assert list(record) == ["level", "logger", "message", "serviceName", "timestamp"]
        assert record == {
            "level": "WARN",
            "logger": "test-logger",
            "message": "hello. Log arguments are: [1]",
            "serviceName": "test-service",
            "timestamp": TS,
        }

    def test_newlines_escaped(self):
        log, sink = make_logger()
        log.info("line1\nline2", "a\nb")
        [line] = sink.lines
        assert "\n" not in line
        assert json.loads(line)["message"].startswith("line1\nline2")

    def test_non_ascii_escaped(self):
        log, sink = make_logger()
        log.info("Grüße")
        [line] = sink.lines
        assert line.isascii()
        assert json.loads(line)["message"].startswith("Grüße")

    def test_lone_surrogate_survives_utf8_stream(self):
        raw = io.BytesIO()
        stream = io.TextIOWrapper(raw, encoding="utf-8")
        log = JsonDiagLogger(BASE, sink=StreamSink(stream), clock=lambda: TS)
        log.info("bad \ud800 text")
        stream.flush()
        record = json.loads(raw.getvalue().decode("utf-8"))
        assert record["message"] == "bad \ud800 text. Log arguments are: []"

    def test_self_referential_arguments_produce_valid_json(self):
        log, sink = make_logger(truncate_limit=40)
        a: list = [1]
        a.append(a)
        d: dict = {"list": a}
        d["me"] = d
        log.error("cyclic", a, d)
        record = json.loads(sink.lines[0])
        assert len(record["message"]) == 40

    def test_formatter_matches_record_mapping(self):
        record = LogRecord("l", "s", LogLevel.INFO, "m", TS)
        assert json.loads(JsonFormatter().format(record)) == record.to_dict()


# ═══════════════════════════════════════════════════════════════════
#  Gate
# ═══════════════════════════════════════════════════════════════════

class TestGate:
    def test_floor(self):
        log, sink = make_logger(min_log_level="WARN")
        log.debug("d")
        log.verbose("v")
        log.info("i")
        log.warn("w")
        log.error("e")
        assert [r["level"] for r in parsed(sink)] == ["WARN", "ERROR"]

    def test_off_floor_suppresses_nothing(self):
        log, sink = make_logger(min_log_level="OFF")
        log.verbose("v")
        log.debug("d")
        assert sink.count == 2

    def test_verbose_override_off_suppresses(self):
        log, sink = make_logger(log_level_for_verbose="OFF")
        log.verbose("x")
        assert sink.count == 0

    def test_service_request_scenarios(self):
        log, sink = make_logger()
        log.error("Service request")
        assert parsed(sink)[-1]["level"] == "ERROR"

        log.set_options({**BASE, "log_level_for_service_request_error_messages": "INFO"})
        log.error("Service request")
        assert parsed(sink)[-1]["level"] == "INFO"

    def test_demoted_error_filtered_by_floor(self):
        log, sink = make_logger(
            min_log_level="WARN",
            log_level_for_timeout_error_messages="INFO",
        )
        log.error("14 UNAVAILABLE: No connection established")
        assert sink.count == 0

    def test_huge_int_argument_emits_one_record(self):
        log, sink = make_logger()
        log.info("big", 10 ** 5000)
        [record] = parsed(sink)
        assert record["message"].startswith("big. Log arguments are: [")

    def test_huge_int_message_with_timeout_override(self):
        log, sink = make_logger(log_level_for_timeout_error_messages="WARN")
        log.error(10 ** 5000)
        [record] = parsed(sink)
        assert record["level"] == "ERROR"

    def test_service_request_check_ignores_non_strings(self):
        class AmbiguousEq:
            def __eq__(self, other):
                raise ValueError("truth value is ambiguous")

        log, sink = make_logger(log_level_for_service_request_error_messages="INFO")
        log.error(AmbiguousEq())
        assert parsed(sink)[0]["level"] == "ERROR"

    def test_log_message_off_level(self):
        log, sink = make_logger()
        log.log_message(LogEntryInput(message="m", level=LogLevel.OFF))
        assert sink.count == 0


# ═══════════════════════════════════════════════════════════════════
#  First incoming request
# ═══════════════════════════════════════════════════════════════════

class TestFirstIncomingRequest:
    def test_reported_once(self):
        log, sink = make_logger(log_first_incoming_request=True)
        log.debug("", MARKER)
        assert parsed(sink) == [{
            "level": "INFO",
            "logger": "test-logger",
            "message": "First incoming request. Log arguments are: []",
            "serviceName": "test-service",
            "timestamp": TS,
        }]
        assert log.first_incoming_request_logged

        log.debug("", MARKER)
        assert sink.count == 1

    def test_synthetic_record_still_gated(self):
        log, sink = make_logger(log_first_incoming_request=True, min_log_level="ERROR")
        log.debug("", MARKER)
        assert sink.count == 0
        assert log.first_incoming_request_logged

    def test_state_survives_option_replacement(self):
        log, sink = make_logger(log_first_incoming_request=True)
        log.debug("", MARKER)
        log.set_options({**BASE, "log_first_incoming_request": True})
        log.debug("", MARKER)
        assert sink.count == 1

    def test_other_debug_requires_floor(self):
        log, sink = make_logger(log_first_incoming_request=True)
        log.debug("span ended")
        assert sink.count == 0

        log.set_options({**BASE, "log_first_incoming_request": True, "min_log_level": "DEBUG"})
        log.debug("span ended")
        assert sink.count == 1


# ═══════════════════════════════════════════════════════════════════
#  Options
# ═══════════════════════════════════════════════════════════════════

class TestOptions:
    def test_accepts_snapshot(self):
        opts = LoggerOptions(**BASE)
        log = JsonDiagLogger(opts, sink=ListSink())
        assert log.options is opts

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            JsonDiagLogger(["not", "options"])

    def test_replacement_does_not_merge(self):
        log, sink = make_logger(truncate_limit=5, truncated_text="")
        log.info("a long message")
        assert parsed(sink)[-1]["message"] == "a lon"

        log.set_options({"logger_name": "other", "service_name": "svc"})
        log.info("a long message")
        last = parsed(sink)[-1]
        assert last["message"] == "a long message. Log arguments are: []"
        assert last["logger"] == "other"
        assert last["serviceName"] == "svc"

    def test_invalid_replacement_keeps_previous(self):
        log, _ = make_logger()
        before = log.options
        with pytest.raises(ValidationError):
            log.set_options({"logger_name": "only-name"})
        assert log.options is before

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "diag.yaml"
        path.write_text(
            "logger_name: yaml-logger\n"
            "service_name: yaml-service\n"
            "min_log_level: warn\n",
            encoding="utf-8",
        )
        sink = ListSink()
        log = JsonDiagLogger.from_yaml(path, sink=sink)
        log.info("dropped")
        log.warn("kept")
        [record] = parsed(sink)
        assert record["logger"] == "yaml-logger"
        assert record["level"] == "WARN"


# ═══════════════════════════════════════════════════════════════════
#  Sinks
# ═══════════════════════════════════════════════════════════════════

class TestSinks:
    def test_default_sink_writes_stdout(self, capsys):
        log = JsonDiagLogger(BASE, clock=lambda: TS)
        log.info("hello")
        captured = capsys.readouterr()
        assert captured.out.endswith("\n")
        assert json.loads(captured.out)["message"] == "hello. Log arguments are: []"

    def test_stream_sink_explicit_stream(self):
        stream = io.StringIO()
        sink = StreamSink(stream)
        sink.write("one")
        sink.write("two")
        assert stream.getvalue() == "one\ntwo\n"
        assert sink.stream is stream

    def test_list_sink_clear(self):
        sink = ListSink()
        sink.write("x")
        assert sink.lines == ["x"]
        sink.clear()
        assert sink.count == 0

    def test_sink_failure_does_not_crash(self):
        class BrokenSink(LineSink):
            def write(self, line):
                raise RuntimeError("sink exploded")

        log = JsonDiagLogger(BASE, sink=BrokenSink())
        log.error("this should not crash")


# ═══════════════════════════════════════════════════════════════════
#  Status / helpers
# ═══════════════════════════════════════════════════════════════════

class TestStatus:
    def test_status(self):
        log, _ = make_logger(min_log_level="INFO")
        status = log.status()
        assert status["options"]["min_log_level"] == "INFO"
        assert status["first_incoming_request_logged"] is False
        assert status["sink"] == "ListSink"
        assert status["formatter"] == "JsonFormatter"

    def test_create_log_entry_uses_current_options(self):
        log, _ = make_logger(truncate_limit=4, truncated_text="")
        record = log.create_log_entry(LogEntryInput(message="abcdef", level=LogLevel.WARN))
        assert record.message == "abcd"
        assert record.timestamp == TS
