"""Base response classifier interface.

This module defines the interface that all response classifiers implement.
Classifiers decide, once per network response and without reading the body,
whether the response carries an ad search payload worth capturing.

Implementations:
    - ContentTypeClassifier: data endpoint path + JSON content type
    - GraphQLMarkerClassifier: API path or query-operation request header
"""

from abc import ABC, abstractmethod
from typing import Any


class BaseResponseClassifier(ABC):
    """Abstract base class for response classifiers.

    Subclasses implement ``_matches``; ``accepts`` wraps it so that a
    classifier never raises into the network listener.
    """

    name = "base"

    def accepts(self, response: Any) -> bool:
        """
        Determine if a response body should be captured.

        Args:
            response: Playwright Response (or any object with the same surface)

        Returns:
            True if the payload is of interest, False otherwise (including on error)
        """
        try:
            return bool(self._matches(response))
        except Exception:
            return False

    @abstractmethod
    def _matches(self, response: Any) -> bool:
        pass
