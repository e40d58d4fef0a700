from __future__ import annotations

"""html_extract.py — find the header pointer inside a table's HTML page.

Pages look like <meta name="bmstable" content="head.json">, but nothing
enforces the attribute name: `content=`, `value=`, `key=` are all seen in the wild.
The tools people build tables for just take the first quoted value after the marker,
so that is exactly what we do too. This is not an HTML parser and should not become one.
"""

import re
from typing import Optional
from urllib.parse import urljoin

from .errors import MissingPointerError


# `.` stops at newlines: the value must follow the marker on the same line.
_BMSTABLE_META_RE = re.compile(r'<meta\s+name="bmstable".*?="(.*?)"')


def read_bmstable_pointer(html: str) -> Optional[str]:
    """Return the first bmstable pointer in `html`, or None."""
    m = _BMSTABLE_META_RE.search(html or "")
    if not m:
        return None
    return m.group(1)


def extract_header_pointer(html: str, url: str) -> str:
    pointer = read_bmstable_pointer(html)
    if pointer is None:
        raise MissingPointerError(url)
    return pointer


def resolve_header_url(html: str, url: str, base_url: str) -> str:
    """Pointer joined onto `base_url`; a pointer urllib cannot split counts as unreadable."""
    pointer = extract_header_pointer(html, url)
    try:
        return urljoin(base_url, pointer.strip())
    except ValueError as e:
        raise MissingPointerError(url) from e
