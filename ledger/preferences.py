"""
Preference Store

Persists the position of the floating "add record" button across runs.

DESIGN DECISION: Dragging the button produces a burst of position changes.
`save` is the on-change hook the owning component calls for each of them;
writes are debounced so only the last position of a burst reaches storage.
"""

import threading
from typing import Optional

import structlog
from pydantic import ValidationError

from ledger.models.preferences import ButtonPosition
from ledger.services.storage import PreferenceStorageInterface, StorageError


DEFAULT_POSITION = ButtonPosition(x=200, y=400)


class PreferenceStore:
    """Debounced persistence of the add button position."""

    def __init__(
        self,
        storage: PreferenceStorageInterface,
        *,
        key: str = "plusButtonPosition",
        delay: float = 2.0,
        default: ButtonPosition = DEFAULT_POSITION,
    ):
        self._storage = storage
        self._key = key
        self._delay = delay
        self._default = default
        self._logger = structlog.get_logger(__name__)

        # Guards the pending value, timer handle and generation; the timer fires on its own thread
        self._lock = threading.Lock()
        self._pending: Optional[ButtonPosition] = None
        self._timer: Optional[threading.Timer] = None
        self._generation = 0

    def load(self) -> ButtonPosition:
        """
        Return the stored position, or the default if there is none.

        Never raises: unreadable or undecodable values fall back to the default.
        """
        try:
            data = self._storage.get_bytes(self._key)
        except StorageError as e:
            self._logger.warning("preference_read_failed", key=self._key, error=str(e))
            return self._default

        if data is None:
            return self._default

        try:
            return ButtonPosition.from_bytes(data)
        except ValidationError as e:
            self._logger.warning(
                "preference_decode_failed",
                key=self._key,
                error_count=e.error_count(),
            )
            return self._default

    def save(self, position: ButtonPosition) -> None:
        """Schedule a write of `position`, replacing any write still pending."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._pending = position
            self._timer = threading.Timer(self._delay, self._fire, args=(self._generation,))
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> None:
        """Write the pending position now, if there is one."""
        with self._lock:
            position = self._take_pending()
        self._write(position)

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A later save restarted the window
            if generation != self._generation:
                return
            position = self._take_pending()
        self._write(position)

    def _take_pending(self) -> Optional[ButtonPosition]:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        position, self._pending = self._pending, None
        return position

    def _write(self, position: Optional[ButtonPosition]) -> None:
        if position is None:
            return
        try:
            self._storage.set_bytes(self._key, position.to_bytes())
        except StorageError as e:
            self._logger.warning("preference_write_failed", key=self._key, error=str(e))
            return
        self._logger.debug("preference_saved", key=self._key, x=position.x, y=position.y)

    @property
    def has_pending(self) -> bool:
        with self._lock:
            return self._pending is not None
