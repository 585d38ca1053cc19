"""Network capture for intercepting ad search payloads."""

import asyncio
import itertools
import threading
from typing import Any, List, Optional

from ..classifiers.base_classifier import BaseResponseClassifier
from ..core.errors import WaitTimeoutError
from ..core.models import CapturedPayload


class NetworkCapture:
    """
    Capture response bodies accepted by a classifier.

    Responses arrive asynchronously and several handlers may be in flight
    at once. The sequence index comes from a lock-guarded counter and the
    payload log is append-only with a fixed capacity.

    Classification happens on arrival without reading the body; the body
    is only fetched for accepted responses.
    """

    def __init__(
        self,
        classifier: BaseResponseClassifier,
        storage: Optional[Any] = None,
        max_payloads: int = 500
    ):
        self.classifier = classifier
        self.storage = storage
        self.max_payloads = max_payloads

        self.payloads: List[CapturedPayload] = []
        self.dropped = 0
        self.seen_responses = 0

        self._counter = itertools.count(1)
        self._lock = threading.Lock()
        self._arrival: Optional[asyncio.Condition] = None

    def attach_to_page(self, page):
        """Attach network listener to Playwright page."""
        page.on("response", self._handle_response)

    def _next_index(self) -> int:
        with self._lock:
            return next(self._counter)

    def _condition(self) -> asyncio.Condition:
        if self._arrival is None:
            self._arrival = asyncio.Condition()
        return self._arrival

    @property
    def count(self) -> int:
        with self._lock:
            return len(self.payloads)

    async def _handle_response(self, response):
        """Handle network response."""
        self.seen_responses += 1
        try:
            if not self.classifier.accepts(response):
                return

            body = await response.text()
            index = self._next_index()
            handle = None
            if self.storage is not None:
                handle = self.storage.save_raw_payload(body, index)

            payload = CapturedPayload(
                sequence_index=index,
                raw_body=body,
                url=response.url,
                storage_handle=handle
            )

            with self._lock:
                if len(self.payloads) >= self.max_payloads:
                    self.dropped += 1
                    accepted = False
                else:
                    self.payloads.append(payload)
                    accepted = True

            if not accepted:
                print(f"    ⚠ Payload log full ({self.max_payloads}), response #{index} dropped")
                return

            print(f"    [CAPTURE] ✓ Saved response #{index} ({len(body)} chars)")

            condition = self._condition()
            async with condition:
                condition.notify_all()

        except Exception as e:
            print(f"    ⚠ Network capture error: {e}")

    async def wait_for_payloads(self, minimum: int, timeout: int) -> int:
        """
        Wait until at least ``minimum`` payloads have been captured.

        Args:
            minimum: Payload count to reach
            timeout: Bound in milliseconds

        Returns:
            Payload count when the condition held

        Raises:
            WaitTimeoutError: if the bound elapsed first
        """
        condition = self._condition()
        try:
            async with condition:
                await asyncio.wait_for(
                    condition.wait_for(lambda: self.count >= minimum),
                    timeout=timeout / 1000
                )
        except asyncio.TimeoutError:
            raise WaitTimeoutError(
                f"{self.count} payload(s) captured, expected {minimum} within {timeout} ms",
                stage='network'
            ) from None
        return self.count

    def snapshot(self) -> List[CapturedPayload]:
        """Captured payloads in ascending sequence order."""
        with self._lock:
            return sorted(self.payloads, key=lambda p: p.sequence_index)

    def get_capture_summary(self) -> dict:
        return {
            'responses_seen': self.seen_responses,
            'payloads_captured': self.count,
            'payloads_dropped': self.dropped,
        }
