import logging
import sys

import httpx
import pytest
import respx
from sodium_mcp.core.client import SodiumClient, SodiumClientError
from sodium_mcp.core.config import SodiumConfig
from sodium_mcp.core.logging import QUIET_LOGGERS, LogfmtFormatter, setup_logging
from sodium_mcp.core.observability import log_event, timed_call

BASE = "https://api.sodium.test"


def _client():
    return SodiumClient(SodiumConfig(api_key="key", tenant="acme", base_url=BASE))


@pytest.mark.asyncio
@respx.mock
async def test_sodium_call_logged_on_success(caplog):
    caplog.set_level(logging.INFO, logger="sodium_mcp.observability")
    route = respx.get(f"{BASE}/tenants/acme/tasks/T1").mock(
        return_value=httpx.Response(200, json={"code": "T1"})
    )
    client = _client()
    try:
        await client.get_task("T1")
    finally:
        await client.aclose()

    assert route.called
    record = next(r for r in caplog.records if r.getMessage() == "sodium_call")
    assert record.tool == "tasks"
    assert record.tenant == "acme"
    assert record.method == "GET"
    assert record.status == 200
    assert record.endpoint == "/tenants/acme/tasks/T1"
    assert record.duration_ms >= 0


@pytest.mark.asyncio
@respx.mock
async def test_sodium_call_logged_on_exception(caplog):
    caplog.set_level(logging.INFO, logger="sodium_mcp.observability")
    respx.get(f"{BASE}/tenants/acme/clients").mock(
        side_effect=httpx.ConnectTimeout("boom")
    )
    client = _client()
    with pytest.raises(SodiumClientError):
        await client.list_clients()
    await client.aclose()

    record = next(r for r in caplog.records if r.getMessage() == "sodium_call")
    assert record.tool == "clients"
    assert record.status == "exception"
    assert record.error_type == "ConnectTimeout"
    assert record.endpoint == "/tenants/acme/clients"


def test_log_event_drops_reserved_keys(caplog):
    caplog.set_level(logging.INFO, logger="sodium_mcp.observability")
    log_event("custom", tool="x", name="clash", lineno=-1)

    record = next(r for r in caplog.records if r.getMessage() == "custom")
    assert record.tool == "x"
    assert record.name == "sodium_mcp.observability"
    assert record.lineno != -1


def test_logfmt_formatter_renders_extras_and_quotes():
    record = logging.LogRecord(
        name="sodium_mcp.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="tool_failed",
        args=(),
        exc_info=None,
    )
    record.tool = "get_engagement"
    record.error_type = "SodiumHTTPError"
    record.endpoint = "/tenants/a b"

    line = LogfmtFormatter().format(record)

    assert line.startswith("level=warning logger=sodium_mcp.test event=tool_failed")
    assert "tool=get_engagement" in line
    assert "error_type=SodiumHTTPError" in line
    assert 'endpoint="/tenants/a b"' in line
    assert "status=" not in line


def test_setup_logging_replaces_handlers():
    root = logging.getLogger()
    saved = (list(root.handlers), root.level)
    try:
        setup_logging("debug")
        setup_logging("warning")
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, LogfmtFormatter)
        assert root.level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
        for h in saved[0]:
            root.addHandler(h)
        root.setLevel(saved[1])
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.NOTSET)


def test_timed_call_merges_outcome_fields(caplog):
    caplog.set_level(logging.INFO, logger="sodium_mcp.observability")

    with timed_call("probe", tool="t", status="pending") as call:
        call["status"] = 201

    record = next(r for r in caplog.records if r.getMessage() == "probe")
    assert record.tool == "t"
    assert record.status == 201
    assert record.duration_ms >= 0
    assert not hasattr(record, "error_type")


def test_timed_call_records_exception_and_reraises(caplog):
    caplog.set_level(logging.INFO, logger="sodium_mcp.observability")

    with pytest.raises(KeyError):
        with timed_call("probe", tool="t"):
            raise KeyError("missing")

    record = next(r for r in caplog.records if r.getMessage() == "probe")
    assert record.status == "exception"
    assert record.error_type == "KeyError"


def test_logfmt_formatter_escapes_and_reports_exceptions():
    try:
        raise ValueError("bad value")
    except ValueError:
        exc_info = sys.exc_info()

    record = logging.LogRecord(
        name="sodium_mcp.test",
        level=logging.ERROR,
        pathname=__file__,
        lineno=1,
        msg="multi\nline",
        args=(),
        exc_info=exc_info,
    )

    line = LogfmtFormatter(extra_fields=()).format(record)

    assert line == (
        'level=error logger=sodium_mcp.test event="multi\\nline" '
        'exc_type=ValueError exc="bad value"'
    )
