from __future__ import annotations

from typing import Any, Optional, Union

import requests


def mk_resp(
    body: Union[str, bytes],
    *,
    status: int = 200,
    content_type: Optional[str] = "application/json",
    url: str = "https://example.com/",
) -> requests.Response:
    r = requests.Response()
    r.status_code = status
    r._content = body.encode("utf-8") if isinstance(body, str) else body
    if content_type is not None:
        r.headers["Content-Type"] = content_type
    r.url = url
    return r


class FakeSession:
    """Serves canned responses per URL; a list is consumed one item per request."""

    def __init__(self, routes: dict[str, Any]) -> None:
        self.routes = dict(routes)
        self.calls: list[dict[str, Any]] = []

    def request(self, **kwargs: Any) -> requests.Response:
        self.calls.append(kwargs)
        url = kwargs["url"]
        route = self.routes.get(url)
        if route is None:
            return mk_resp("not found", status=404, content_type="text/plain", url=url)
        if isinstance(route, list):
            item = route.pop(0) if len(route) > 1 else route[0]
        else:
            item = route
        if isinstance(item, Exception):
            raise item
        return item

    def urls(self) -> list[str]:
        return [c["url"] for c in self.calls]
