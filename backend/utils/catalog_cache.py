# backend/utils/catalog_cache.py
import logging
import threading
import time
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class CatalogCache:
    """Time-bounded snapshot of the product collection.

    Owned by whoever creates it (the app keeps one on ``app.state``). The
    snapshot is handed to the pure query functions as-is, so it must be
    detached from the session that loaded it: ``get`` expunges the loaded
    objects before storing them.
    """

    def __init__(self, loader: Callable[[Session], List], ttl_seconds: float = 30.0, clock: Callable[[], float] = time.monotonic):
        self._loader = loader
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot: Optional[List] = None
        self._loaded_at = 0.0

    @property
    def enabled(self) -> bool:
        return self._ttl > 0

    def get(self, db: Session) -> List:
        if not self.enabled:
            return self._loader(db)

        with self._lock:
            now = self._clock()
            if self._snapshot is None or now - self._loaded_at >= self._ttl:
                products = self._loader(db)
                # Detach so the snapshot outlives the request session
                for product in products:
                    db.expunge(product)
                self._snapshot = products
                self._loaded_at = now
                logger.debug("Catalog snapshot reloaded (%d products)", len(products))
            return self._snapshot

    def invalidate(self) -> None:
        with self._lock:
            self._snapshot = None
            self._loaded_at = 0.0
