# adlib_scraper/classifiers/__init__.py
"""Network response classifiers."""

from .base_classifier import BaseResponseClassifier
from .response_classifier import (
    ContentTypeClassifier,
    GraphQLMarkerClassifier,
    build_classifier,
)

__all__ = [
    'BaseResponseClassifier',
    'ContentTypeClassifier',
    'GraphQLMarkerClassifier',
    'build_classifier',
]
