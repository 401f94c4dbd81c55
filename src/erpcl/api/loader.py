"""Fetch-with-fallback loading.

Every read goes through ``load``, which never raises for backend failures.
It returns a ``LoadResult`` that says whether the data is live, is a
fallback sample substituted for an unavailable source, or is missing
entirely. Callers decide how to present the difference.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from erpcl.api.base import Backend
from erpcl.api.errors import BackendError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoadState(str, Enum):
    OK = "ok"
    DEGRADED = "degraded"
    FAILED = "failed"


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    """Outcome of one load: Ok(data), Degraded(fallback, reason) or Failed(error)."""

    state: LoadState
    data: Optional[T]
    reason: Optional[str] = None
    error: Optional[Exception] = None
    total: Optional[int] = None

    @classmethod
    def ok(cls, data: T, total: Optional[int] = None) -> "LoadResult[T]":
        return cls(LoadState.OK, data, total=total)

    @classmethod
    def degraded(
        cls, fallback: T, reason: str, error: Optional[Exception] = None
    ) -> "LoadResult[T]":
        return cls(LoadState.DEGRADED, fallback, reason=reason, error=error)

    @classmethod
    def failed(cls, error: Exception) -> "LoadResult[T]":
        return cls(LoadState.FAILED, None, reason=str(error), error=error)

    @property
    def is_live(self) -> bool:
        return self.state == LoadState.OK

    @property
    def is_sample(self) -> bool:
        return self.state == LoadState.DEGRADED

    def unwrap(self) -> T:
        """Return the data, raising the original error for failed loads."""
        if self.state == LoadState.FAILED:
            assert self.error is not None
            raise self.error
        return self.data  # type: ignore[return-value]


def load(
    backend: Backend,
    path: str,
    fallback: Optional[T] = None,
    params: Optional[dict[str, Any]] = None,
    timeout: Optional[float] = None,
    mapper: Optional[Callable[[Any], T]] = None,
) -> LoadResult[T]:
    """GET ``path`` and adopt its ``data``, or substitute ``fallback``.

    Network errors, timeouts, non-2xx statuses, ``success: false``,
    malformed bodies and data the mapper cannot read all degrade to the
    fallback. Without a fallback the load fails instead.

    Args:
        backend: Backend to read from
        path: Endpoint path, e.g. '/purchase-orders'
        fallback: Sample dataset to show when the backend is unavailable
        params: Optional query parameters
        timeout: Optional timeout overriding the backend default
        mapper: Optional conversion from the raw ``data`` field

    Returns:
        LoadResult describing what was loaded
    """
    try:
        response = backend.get(path, params=params, timeout=timeout)
        if response.data is None:
            raise ValueError("response has no data")
        data = mapper(response.data) if mapper is not None else response.data
    except (BackendError, ArithmeticError, KeyError, TypeError, ValueError) as e:
        if fallback is None:
            logger.warning("Loading %s failed: %s", path, e)
            return LoadResult.failed(e)
        logger.warning("Loading %s failed, using sample data: %s", path, e)
        return LoadResult.degraded(fallback, reason=str(e), error=e)

    return LoadResult.ok(data, total=response.total)


class RequestSequencer:
    """Tags loads with increasing sequence numbers and rejects stale ones.

    A load that resolves after a newer load has already been accepted is
    discarded, so a slow early response cannot overwrite fresher data.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._issued = 0
        self._accepted = 0

    def next(self) -> int:
        with self._lock:
            self._issued += 1
            return self._issued

    def accept(self, sequence: int) -> bool:
        """Return True and record ``sequence`` if nothing newer was accepted."""
        with self._lock:
            if sequence <= self._accepted:
                return False
            self._accepted = sequence
            return True


class View(Generic[T]):
    """Latest accepted LoadResult of one data source.

    ``refresh`` runs a load and adopts it unless a newer one already won.
    Reads may happen from any thread.
    """

    def __init__(self, initial: T):
        self._sequencer = RequestSequencer()
        self._lock = threading.Lock()
        self._result: LoadResult[T] = LoadResult.ok(initial)

    def begin(self) -> int:
        return self._sequencer.next()

    def resolve(self, sequence: int, result: LoadResult[T]) -> bool:
        """Adopt ``result`` if it is the newest resolution so far."""
        if not self._sequencer.accept(sequence):
            logger.debug("Discarding stale load #%d", sequence)
            return False
        if result.state == LoadState.FAILED:
            # keep showing the previous data, but record the failure
            with self._lock:
                self._result = LoadResult(
                    LoadState.FAILED, self._result.data, reason=result.reason, error=result.error
                )
            return True
        with self._lock:
            self._result = result
        return True

    def refresh(self, loader: Callable[[], LoadResult[T]]) -> LoadResult[T]:
        sequence = self.begin()
        self.resolve(sequence, loader())
        return self.result

    @property
    def result(self) -> LoadResult[T]:
        with self._lock:
            return self._result

    @property
    def data(self) -> T:
        return self.result.data  # type: ignore[return-value]
