import pytest

from adlib_scraper.classifiers import (
    ContentTypeClassifier,
    GraphQLMarkerClassifier,
    build_classifier,
)
from conftest import FakeResponse


SEARCH_URL = "https://www.facebook.com/ads/library/async/search_ads/?q=shoes"


class ExplodingResponse:
    """Response whose header/request inspection raises."""
    url = SEARCH_URL

    @property
    def headers(self):
        raise RuntimeError("headers unavailable")

    @property
    def request(self):
        raise RuntimeError("request unavailable")


class TestContentTypeClassifier:
    def test_accepts_json_from_data_endpoint(self):
        response = FakeResponse(SEARCH_URL, headers={'content-type': 'application/json; charset=utf-8'})
        assert ContentTypeClassifier().accepts(response) is True

    def test_rejects_html_from_data_endpoint(self):
        response = FakeResponse(SEARCH_URL, headers={'content-type': 'text/html'})
        assert ContentTypeClassifier().accepts(response) is False

    def test_content_type_match_is_case_insensitive(self):
        response = FakeResponse(SEARCH_URL, headers={'Content-Type': 'Application/JSON'})
        assert ContentTypeClassifier().accepts(response) is True

    def test_rejects_json_outside_data_endpoint(self):
        response = FakeResponse("https://www.facebook.com/api/other", headers={'content-type': 'application/json'})
        assert ContentTypeClassifier().accepts(response) is False

    def test_header_inspection_error_is_rejection(self):
        assert ContentTypeClassifier().accepts(ExplodingResponse()) is False


class TestGraphQLMarkerClassifier:
    def test_accepts_api_path(self):
        response = FakeResponse("https://www.facebook.com/api/graphql/")
        assert GraphQLMarkerClassifier().accepts(response) is True

    def test_accepts_operation_header(self):
        response = FakeResponse(
            "https://www.facebook.com/ajax/query",
            request_headers={'x-fb-friendly-name': 'AdLibrarySearchPaginationQuery'}
        )
        assert GraphQLMarkerClassifier().accepts(response) is True

    def test_rejects_other_operation(self):
        response = FakeResponse(
            "https://www.facebook.com/ajax/query",
            request_headers={'x-fb-friendly-name': 'CometNotificationsQuery'}
        )
        assert GraphQLMarkerClassifier().accepts(response) is False

    def test_request_error_is_rejection(self):
        response = ExplodingResponse()
        response.url = "https://www.facebook.com/ajax/query"
        assert GraphQLMarkerClassifier().accepts(response) is False


class TestBuildClassifier:
    def test_modes(self):
        assert isinstance(build_classifier('graphql'), GraphQLMarkerClassifier)
        assert isinstance(build_classifier('content-type'), ContentTypeClassifier)

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            build_classifier('html')
