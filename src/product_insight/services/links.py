"""Deep-link helpers for barcode and search-query URLs."""

from urllib.parse import parse_qs, quote


def get_product_url(base_url: str, barcode: str) -> str:
    """Return a shareable URL that opens the product."""
    return f"{base_url}?barcode={quote(barcode, safe='')}"


def parse_search_params(query_string: str) -> tuple[str | None, str | None]:
    """Extract trimmed ``barcode`` and ``q`` values from a query string."""
    params = parse_qs(query_string.lstrip("?"), keep_blank_values=True)
    return _first(params, "barcode"), _first(params, "q")


def initial_search_value(query_string: str) -> str:
    """Initial search box value: the barcode if linked, else the query."""
    barcode, query = parse_search_params(query_string)
    return barcode or query or ""


def _first(params: dict[str, list[str]], key: str) -> str | None:
    values = params.get(key)
    if not values:
        return None
    return values[0].strip() or None
