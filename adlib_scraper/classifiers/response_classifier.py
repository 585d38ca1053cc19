"""Response classifiers for ad search payloads.

Two heuristics are observed for "is this a search-results payload"; which
one is active is a configuration choice since markup and endpoint changes
may favour either.
"""

from typing import Any, Mapping, Optional
from urllib.parse import urlparse

from .base_classifier import BaseResponseClassifier


DATA_ENDPOINT_MARKER = "/ads/library/"
API_PATH_MARKER = "/api/graphql"
OPERATION_HEADER = "x-fb-friendly-name"
OPERATION_MARKER = "AdLibrarySearchPaginationQuery"


def _header(headers: Optional[Mapping[str, str]], name: str) -> str:
    """Case-insensitive header lookup."""
    if not headers:
        return ""
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value or ""
    return ""


class ContentTypeClassifier(BaseResponseClassifier):
    """Accept responses from the data endpoint that declare a JSON body."""

    name = "content-type"

    def __init__(self, endpoint_marker: str = DATA_ENDPOINT_MARKER):
        self.endpoint_marker = endpoint_marker

    def _matches(self, response: Any) -> bool:
        path = urlparse(response.url).path
        if self.endpoint_marker not in path:
            return False
        content_type = _header(response.headers, 'content-type')
        return 'json' in content_type.lower()


class GraphQLMarkerClassifier(BaseResponseClassifier):
    """Accept GraphQL API responses or requests tagged with the search operation."""

    name = "graphql"

    def __init__(
        self,
        api_marker: str = API_PATH_MARKER,
        header_name: str = OPERATION_HEADER,
        operation_marker: str = OPERATION_MARKER
    ):
        self.api_marker = api_marker
        self.header_name = header_name
        self.operation_marker = operation_marker

    def _matches(self, response: Any) -> bool:
        if self.api_marker.lower() in response.url.lower():
            return True

        request = response.request
        if request is None:
            return False
        operation = _header(request.headers, self.header_name)
        return self.operation_marker in operation


CLASSIFIERS = {
    ContentTypeClassifier.name: ContentTypeClassifier,
    GraphQLMarkerClassifier.name: GraphQLMarkerClassifier,
}


def build_classifier(mode: str) -> BaseResponseClassifier:
    """
    Create the classifier for a deployment mode.

    Args:
        mode: 'graphql' or 'content-type'

    Raises:
        ValueError: for an unknown mode
    """
    try:
        return CLASSIFIERS[mode]()
    except KeyError:
        raise ValueError(
            f"Unknown classifier mode '{mode}' (expected one of {', '.join(CLASSIFIERS)})"
        ) from None
