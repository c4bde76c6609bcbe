"""
Live feature store - the single shared feature set.

Design rationale:
The poller and the flight locator both write the set the map draws. Rather
than sharing a mutable global, both go through this store:
- replace() swaps in a whole new collection (poll cycle)
- merge() does read-merge-replace under the lock, always against the
  latest published value (search result)

Published collections are immutable, so readers never need the lock.
Subscribers are called after every publish with the new collection.
"""

import logging
import threading
import time
from typing import Callable, List

from flightmap.models.feature import FeatureCollection, RenderedFeature

logger = logging.getLogger(__name__)

Subscriber = Callable[[FeatureCollection], None]


class LiveFeatureStore:
    """Thread-safe holder of the currently published FeatureCollection."""

    def __init__(self, initial: FeatureCollection = None):
        self._current = initial if initial is not None else FeatureCollection.empty()
        self._lock = threading.RLock()
        self._subscribers: List[Subscriber] = []

        # Statistics
        self._publish_count = 0
        self._last_publish: float = 0

    @property
    def current(self) -> FeatureCollection:
        return self._current

    def subscribe(self, callback: Subscriber) -> None:
        """Register callback invoked with each newly published collection."""
        self._subscribers.append(callback)

    def replace(self, collection: FeatureCollection) -> FeatureCollection:
        """Publish a new collection, discarding the previous one."""
        with self._lock:
            self._publish(collection)
        return collection

    def merge(self, feature: RenderedFeature) -> FeatureCollection:
        """Replace any feature with the same callsign and publish the result."""
        with self._lock:
            merged = self._current.merge(feature)
            self._publish(merged)
        logger.debug(f'Merged {feature.callsign} into live set ({len(merged)} features)')
        return merged

    def clear(self) -> None:
        self.replace(FeatureCollection.empty())

    def _publish(self, collection: FeatureCollection) -> None:
        self._current = collection
        self._publish_count += 1
        self._last_publish = time.time()

        for callback in self._subscribers:
            try:
                callback(collection)
            except Exception as e:
                logger.error(f'Feature subscriber error: {e}')

    @property
    def stats(self) -> dict:
        """Get store statistics."""
        with self._lock:
            return {
                'features': len(self._current),
                'publish_count': self._publish_count,
                'last_publish': self._last_publish,
            }
