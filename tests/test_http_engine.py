from __future__ import annotations

import pytest
import requests

from bms_table import http_engine
from bms_table.errors import ConfigurationError, TransportError
from bms_table.http_engine import HttpEngine, RetryPolicy, make_http_engine_from_meta, make_retry_policy_from_cfg

from fakes import FakeSession, mk_resp

URL = "https://example.com/head.json"


def test_returns_first_200_without_retry():
    s = FakeSession({URL: mk_resp("{}", url=URL)})
    resp = HttpEngine(session=s).get(URL)
    assert resp.status_code == 200
    assert s.urls() == [URL]


def test_three_500s_raise_transport_error_with_status():
    s = FakeSession({URL: mk_resp("oops", status=500, url=URL)})
    with pytest.raises(TransportError) as ei:
        HttpEngine(session=s).get(URL)
    assert ei.value.status_code == 500
    assert ei.value.url == URL
    assert "500" in str(ei.value)
    assert len(s.calls) == 3


def test_recovers_after_flaky_403():
    s = FakeSession({URL: [mk_resp("no", status=403, url=URL), mk_resp("{}", url=URL)]})
    resp = HttpEngine(session=s).get(URL)
    assert resp.status_code == 200
    assert len(s.calls) == 2


def test_non_200_success_codes_are_retried_too():
    s = FakeSession({URL: mk_resp("", status=204, url=URL)})
    with pytest.raises(TransportError) as ei:
        HttpEngine(session=s).get(URL)
    assert ei.value.status_code == 204


def test_zero_attempts_is_a_configuration_error():
    s = FakeSession({URL: mk_resp("{}", url=URL)})
    with pytest.raises(ConfigurationError):
        HttpEngine(session=s, retry_policy=RetryPolicy(max_attempts=0)).get(URL)
    assert s.calls == []


def test_network_errors_count_as_attempts():
    s = FakeSession({URL: requests.ConnectionError("boom")})
    with pytest.raises(TransportError) as ei:
        HttpEngine(session=s).get(URL)
    assert ei.value.status_code is None
    assert ei.value.reason == "network_error:ConnectionError"
    assert len(s.calls) == 3


def test_timeout_applies_to_every_attempt():
    s = FakeSession({URL: mk_resp("", status=502, url=URL)})
    with pytest.raises(TransportError):
        HttpEngine(session=s, default_timeout=4.0).get(URL, timeout=1.5)
    assert [c["timeout"] for c in s.calls] == [1.5, 1.5, 1.5]


def test_no_sleep_by_default(monkeypatch):
    slept: list[float] = []
    monkeypatch.setattr(http_engine.time, "sleep", lambda sec: slept.append(sec))
    s = FakeSession({URL: mk_resp("", status=500, url=URL)})
    with pytest.raises(TransportError):
        HttpEngine(session=s).get(URL)
    assert slept == []


def test_backoff_when_base_delay_set(monkeypatch):
    slept: list[float] = []
    monkeypatch.setattr(http_engine.time, "sleep", lambda sec: slept.append(sec))
    s = FakeSession({URL: mk_resp("", status=500, url=URL)})
    pol = RetryPolicy(max_attempts=4, base_delay=0.5, cap_delay=1.0)
    with pytest.raises(TransportError):
        HttpEngine(session=s, retry_policy=pol).get(URL)
    assert slept == [0.5, 1.0, 1.0]


def test_diag_line_on_stderr(capsys):
    s = FakeSession({URL: [mk_resp("", status=503, url=URL), mk_resp("{}", url=URL)]})
    eng = HttpEngine(session=s, diag_http=True)
    eng.get(URL)
    err = capsys.readouterr().err
    assert "[HTTP] GET example.com sc=503" in err
    assert "try=1/3" in err
    assert eng.last_diag["status"] == 503


def test_engine_from_meta():
    s = FakeSession({})
    eng = make_http_engine_from_meta(
        {"retries": {"max_attempts": 5, "base_delay": 0.25}, "timeout": 3, "headers": {"User-Agent": "x"}},
        session=s,
    )
    assert eng.retry_policy.max_attempts == 5
    assert eng.retry_policy.base_delay == 0.25
    assert eng.default_timeout == 3.0
    assert eng.default_headers["User-Agent"] == "x"
    assert "Accept" in eng.default_headers


def test_retry_policy_defaults_from_bad_cfg():
    assert make_retry_policy_from_cfg(None) == RetryPolicy()  # type: ignore[arg-type]
    assert RetryPolicy().max_attempts == 3


def test_explicit_zero_timeout_is_kept():
    s = FakeSession({URL: mk_resp("{}", url=URL)})
    HttpEngine(session=s, default_timeout=4.0).get(URL, timeout=0)
    assert s.calls[0]["timeout"] == 0.0
    assert make_http_engine_from_meta({"timeout": 0}, session=s).default_timeout == 0.0
