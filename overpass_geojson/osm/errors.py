"""
Overpass API errors

Classifies failed Overpass responses by HTTP status
"""

import html
import re
from typing import List, Optional

_SERVER_ERROR_LINE = re.compile(r"</strong>: ([^<]+) </p>")


class OverpassError(Exception):
    """Base error for everything returned by (or wrong with) Overpass"""

    def __init__(self, message: str):
        super().__init__(f"Overpass Error: {message}")


class OverpassApiStatusError(OverpassError):
    """Overpass answered with a non-success HTTP status"""

    def __init__(self, message: str, status: int):
        super().__init__(f"Overpass API Error: {message}")
        self.status = status


class OverpassQueryError(OverpassApiStatusError):
    """The query was rejected as malformed (HTTP 400)"""


class OverpassRateLimitError(OverpassApiStatusError):
    """Too many requests (HTTP 429)"""


class OverpassServerError(OverpassApiStatusError):
    """Internal server error (HTTP 5xx)"""


class OverpassGatewayTimeoutError(OverpassServerError):
    """Gateway timeout (HTTP 504)"""


def extract_server_errors(response_text: Optional[str]) -> List[str]:
    """Pull the '<strong>Error</strong>: ...' lines out of an Overpass HTML error page"""
    if not response_text:
        return []
    return [html.unescape(match) for match in _SERVER_ERROR_LINE.findall(response_text)]


def _indent_query(query: str) -> str:
    return query.replace("\n", "\n  ")


def get_status_error(status: int, query: str, response_text: Optional[str] = None) -> OverpassApiStatusError:
    """
    Build the error matching an Overpass HTTP status

    Args:
        status: HTTP status code
        query: Query text that was sent
        response_text: Response body, used to extract server error lines

    Returns:
        Classified error (not raised)
    """
    errors = extract_server_errors(response_text)
    error = "\n".join(errors) if errors else "Unknown error"

    if status == 400:
        return OverpassQueryError(
            f"HTTP error: {status}\nErrors:\n{error}\nQuery:\n{_indent_query(query)}",
            status,
        )
    if status == 429:
        return OverpassRateLimitError("Rate limit exceeded", status)
    if status == 504:
        return OverpassGatewayTimeoutError("Gateway timeout", status)
    if status == 500:
        return OverpassServerError("Internal server error", status)
    if status > 500:
        return OverpassServerError(f"Server error {status}", status)

    if errors:
        return OverpassApiStatusError(f"Errors:\n{error}\nQuery:\n{_indent_query(query)}", status)
    return OverpassApiStatusError("Unknown error", status)
