from __future__ import annotations

"""
loader.py — load_table(): URL in, Table out.

Pipeline (strictly in order, each step needs the previous one):
  1) GET url
  2) JSON header?  -> decode it
     HTML page?    -> read <meta name="bmstable">, GET the header it points to
  3) validate the header
  4) GET data_url (relative to the header's own URL)
  5) normalize the body
"""

from typing import Optional

import requests

from .html_extract import resolve_header_url
from .http_engine import HttpEngine
from .resp_read import decode_document, read_text_safely, sniff_payload_kind
from .table import Table
from .table_body import normalize_body_report
from .table_head import parse_head, resolve_data_location


def _final_url(resp: requests.Response, requested: str) -> str:
    # relative pointers resolve against where we actually ended up after redirects
    return getattr(resp, "url", None) or requested


def load_table(
    url: str,
    *,
    engine: Optional[HttpEngine] = None,
    timeout: Optional[float] = None,
) -> Table:
    """
    Load a BMS table from a URL. This can be an .html page or a link to a JSON header.

    Raises one of the errors in bms_table.errors; bad charts inside the body never raise.
    """
    engine = engine or HttpEngine()

    first = engine.get(url, timeout=timeout)
    page = read_text_safely(first)
    kind = sniff_payload_kind(first.headers.get("Content-Type"), page.text)

    if kind == "json":
        head_url = _final_url(first, url)
        head_text = page.text
    else:
        head_url = resolve_header_url(page.text, url, _final_url(first, url))
        head_resp = engine.get(head_url, timeout=timeout)
        head_url = _final_url(head_resp, head_url)
        head_text = read_text_safely(head_resp).text

    head = parse_head(decode_document(head_text, source=f"header {head_url}"))

    body_url = resolve_data_location(head, head_url)
    body_resp = engine.get(body_url, timeout=timeout)
    body_data = decode_document(read_text_safely(body_resp).text, source=f"body {body_url}")
    report = normalize_body_report(body_data)

    return Table(
        head=head,
        body=tuple(report.entries),
        url=url,
        head_url=head_url,
        body_url=body_url,
        dropped_entries=report.dropped,
    )
