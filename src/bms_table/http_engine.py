from __future__ import annotations

"""
http_engine.py — the single HTTP "engine" for table loading:
requests.Session + bounded retry.

BMS tables are typically on unstable hosting that randomly fails.
Even a 403 is worth retrying: some hosts 403 for a moment and then stop.

Key points:
- only status 200 counts as success; everything else is retried
- RetryPolicy.max_attempts includes the first request
- no delay between attempts by default; base_delay > 0 enables capped backoff
- timeout is per attempt
- factories from dict config:
  - make_retry_policy_from_cfg
  - make_http_engine_from_meta
"""

import random
import sys
import time
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlparse

import requests

from .errors import ConfigurationError, TransportError


DEFAULT_HEADERS: dict[str, str] = {
    "Accept": "application/json, text/html;q=0.9, */*;q=0.8",
}


# =========================
# Retry / backoff
# =========================

@dataclass
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 0.0
    cap_delay: float = 8.0
    jitter: str = "none"  # none | full


def make_retry_policy_from_cfg(cfg: dict[str, Any]) -> RetryPolicy:
    if not isinstance(cfg, dict):
        return RetryPolicy()
    return RetryPolicy(
        max_attempts=int(cfg.get("max_attempts", 3)),
        base_delay=float(cfg.get("base_delay", 0.0)),
        cap_delay=float(cfg.get("cap_delay", 8.0)),
        jitter=str(cfg.get("jitter", "none")),
    )


def _backoff_delay(attempt: int, pol: RetryPolicy) -> float:
    if pol.base_delay <= 0:
        return 0.0
    exp = pol.base_delay * (2 ** max(0, attempt - 1))
    delay = min(pol.cap_delay, exp)
    if pol.jitter == "full":
        return float(random.uniform(0.0, delay))
    return float(delay)


def _domain_of(url: str) -> str:
    try:
        return urlparse(url).netloc.lower()
    except ValueError:
        return ""


# =========================
# HttpEngine
# =========================

class HttpEngine:
    """Single point for HTTP GETs (retry + diagnostics)."""

    def __init__(
        self,
        *,
        default_timeout: float = 10.0,
        default_headers: Optional[dict[str, str]] = None,
        retry_policy: Optional[RetryPolicy] = None,
        diag_http: bool = False,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.default_timeout = float(default_timeout)
        self.default_headers = dict(DEFAULT_HEADERS)
        self.default_headers.update(default_headers or {})
        self.retry_policy = retry_policy or RetryPolicy()
        self.diag_http = bool(diag_http)
        self.last_diag: Optional[dict[str, Any]] = None
        self.session = session or requests.Session()

    def _emit_diag(self, d: dict[str, Any]) -> None:
        self.last_diag = d
        if not self.diag_http:
            return
        # one short line to stderr
        parts = [
            f"[HTTP] GET {d.get('domain')} sc={d.get('status')} err={d.get('err')}",
            f"try={d.get('attempt')}/{d.get('max_attempts')}",
            f"elapsed={d.get('elapsed_ms')}ms",
            f"url={d.get('url')}",
        ]
        sys.stderr.write(" ".join(parts) + "\n")

    def _sleep(self, sec: float) -> None:
        if sec and sec > 0:
            time.sleep(float(sec))

    def get(
        self,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> requests.Response:
        """GET `url`; return the first 200 response or raise TransportError."""
        pol = self.retry_policy
        if pol.max_attempts <= 0:
            raise ConfigurationError(f"Attempted to fetch {url} with {pol.max_attempts} attempts.")

        domain = _domain_of(url)
        merged_headers = dict(self.default_headers)
        if headers:
            merged_headers.update(headers)

        last_status: Optional[int] = None
        last_err: Optional[str] = None

        for attempt in range(1, pol.max_attempts + 1):
            t0 = time.monotonic()
            try:
                resp: Optional[requests.Response] = self.session.request(
                    method="GET",
                    url=url,
                    headers=merged_headers,
                    timeout=float(timeout if timeout is not None else self.default_timeout),
                    allow_redirects=True,
                )
            except requests.Timeout:
                resp = None
                last_status = None
                last_err = "timeout"
            except requests.RequestException as e:
                resp = None
                last_status = None
                last_err = f"network_error:{type(e).__name__}"
            elapsed_ms = int((time.monotonic() - t0) * 1000)

            if resp is not None:
                if resp.status_code == 200:
                    return resp
                last_status = resp.status_code
                last_err = f"http_{last_status}"

            self._emit_diag({
                "url": url,
                "domain": domain,
                "status": last_status,
                "err": last_err,
                "attempt": attempt,
                "max_attempts": pol.max_attempts,
                "elapsed_ms": elapsed_ms,
            })

            if attempt < pol.max_attempts:
                self._sleep(_backoff_delay(attempt, pol))

        raise TransportError(url, last_status, last_err)


def make_http_engine_from_meta(
    http_meta: dict[str, Any],
    *,
    session: Optional[requests.Session] = None,
) -> HttpEngine:
    """
    Build an HttpEngine from a dict config.

    Expected keys (all optional):
      http_meta["retries"]   -> dict for make_retry_policy_from_cfg
      http_meta["timeout"]   -> per-attempt timeout, seconds
      http_meta["headers"]   -> extra request headers
      http_meta["diag_http"] -> write one stderr line per failed attempt
    """
    if not isinstance(http_meta, dict):
        http_meta = {}
    rt_cfg = http_meta.get("retries")
    hd_cfg = http_meta.get("headers")

    retry_policy = make_retry_policy_from_cfg(rt_cfg) if isinstance(rt_cfg, dict) else None

    timeout = http_meta.get("timeout")

    return HttpEngine(
        default_timeout=float(timeout if timeout is not None else 10.0),
        default_headers={str(k): str(v) for k, v in hd_cfg.items()} if isinstance(hd_cfg, dict) else None,
        retry_policy=retry_policy,
        diag_http=bool(http_meta.get("diag_http")),
        session=session,
    )
