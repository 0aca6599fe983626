"""Request composition: path + ordered query pairs + headers -> httpx.Request."""

from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

import httpx

from httpconform.core.models import RequestSpec

QueryArg = Union[Mapping[str, str], Iterable[Tuple[str, str]], None]


def compose(path: str, query: QueryArg = None,
            headers: Optional[Dict[str, str]] = None) -> RequestSpec:
    """Build a fresh RequestSpec. Query values are appended in call order."""
    spec = RequestSpec(path=path)
    if query:
        items = query.items() if isinstance(query, Mapping) else query
        for name, value in items:
            spec.add(name, value)
    if headers:
        spec.headers.update(headers)
    return spec


def boundary_values(limit: int, fill: str = "a") -> Tuple[str, str]:
    """Values of length exactly ``limit`` and ``limit + 1``."""
    at_limit = fill * limit
    return at_limit, at_limit + fill


def build_request(client: httpx.Client, base_uri: httpx.URL,
                  spec: RequestSpec) -> httpx.Request:
    """Resolve ``spec`` against ``base_uri``.

    httpx normalizes dot segments in URLs, so the raw target goes through
    the ``target`` request extension and reaches the server untouched.
    """
    target = spec.target()
    url = base_uri.copy_with(raw_path=target.encode("ascii"))
    return client.build_request(
        spec.method, url,
        headers=spec.headers,
        extensions={"target": target.encode("ascii")},
    )
