"""Asynchronous fetch-and-hold state for one remote resource.

A loader keeps the last fetched value, a loading flag and the last error
message. Every request takes a generation token when it starts; only the
request holding the newest token may commit its outcome, so a slow response
to a superseded request never overwrites newer state.
"""

import asyncio
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

from src.domain.errors import ExpenseStoreError
from src.infrastructure.logging.logger import get_app_logger

L = TypeVar("L", bound=Hashable)
T = TypeVar("T")

LoaderStatus = Literal["pending", "ready", "failed"]


@dataclass(frozen=True)
class LoaderSnapshot(Generic[T]):
    """Immutable view of a loader's state.

    Attributes:
        data: Last committed value. Kept after a failed refetch.
        loading: True while the newest request is in flight.
        error: Message of the last failure, cleared when a request starts.
        loaded: True once a value has been committed.
        locator: Locator of the newest request.
    """

    data: T | None
    loading: bool
    error: str | None
    loaded: bool
    locator: Hashable | None

    @property
    def status(self) -> LoaderStatus:
        if self.loading:
            return "pending"
        if self.error is not None:
            return "failed"
        if self.loaded:
            return "ready"
        return "pending"


class DataLoader(Generic[L, T]):
    """Fetch-and-hold state for a single resource keyed by a locator."""

    def __init__(
        self,
        fetch: Callable[[L], Awaitable[T]],
        name: str = "loader",
        logger=None,
    ) -> None:
        """Initialize the loader.

        Args:
            fetch: Coroutine function fetching the resource for a locator.
            name: Label used in log messages.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._fetch = fetch
        self._name = name
        self._logger = logger or get_app_logger()
        self._data: T | None = None
        self._loading = False
        self._error: str | None = None
        self._loaded = False
        self._locator: L | None = None
        self._generation = 0

    @property
    def snapshot(self) -> LoaderSnapshot[T]:
        return LoaderSnapshot(
            data=self._data,
            loading=self._loading,
            error=self._error,
            loaded=self._loaded,
            locator=self._locator,
        )

    @property
    def data(self) -> T | None:
        return self._data

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def locator(self) -> L | None:
        return self._locator

    async def load(self, locator: L | None) -> LoaderSnapshot[T]:
        """Fetch the resource for a locator and commit it if still current.

        An empty locator performs no fetch and leaves the state untouched.

        Args:
            locator: Resource key, for example a month or a query.

        Returns:
            LoaderSnapshot: State after the request settled.
        """
        if _is_empty(locator):
            return self.snapshot
        token = self._start(locator)
        return await self._run(token, locator)

    async def load_if_changed(self, locator: L | None) -> LoaderSnapshot[T]:
        """Fetch only when the locator differs from the last one requested."""
        if _is_empty(locator) or locator == self._locator:
            return self.snapshot
        return await self.load(locator)

    async def refetch(self) -> LoaderSnapshot[T]:
        """Re-issue the last request, for example after a mutation."""
        return await self.load(self._locator)

    def begin(self, locator: L | None) -> "asyncio.Task[LoaderSnapshot[T]]":
        """Start a fetch in the background and return its task.

        The generation token is taken immediately, so a later ``begin`` or
        ``load`` supersedes this request even if its task has not started.
        """
        if _is_empty(locator):
            return asyncio.get_running_loop().create_task(self._settled())
        token = self._start(locator)
        return asyncio.get_running_loop().create_task(
            self._run(token, locator)
        )

    def set_data(self, value: T | None) -> None:
        """Replace the held value locally.

        Any request still in flight is superseded and will not commit.
        """
        self._generation += 1
        self._data = value
        self._loaded = True
        self._loading = False
        self._error = None

    def _start(self, locator: L) -> int:
        self._generation += 1
        self._locator = locator
        self._loading = True
        self._error = None
        return self._generation

    async def _run(self, token: int, locator: L) -> LoaderSnapshot[T]:
        try:
            data = await self._fetch(locator)
        except ExpenseStoreError as exc:
            if token != self._generation:
                self._logger.debug(
                    f"{self._name}: discarded failure of superseded "
                    f"request {locator!r}"
                )
                return self.snapshot
            self._error = str(exc)
            self._loading = False
            self._logger.warning(
                f"{self._name}: fetch failed for {locator!r}: {exc}"
            )
            return self.snapshot
        except BaseException:
            if token == self._generation:
                self._loading = False
            raise

        if token != self._generation:
            self._logger.debug(
                f"{self._name}: discarded result of superseded "
                f"request {locator!r}"
            )
            return self.snapshot
        self._data = data
        self._loaded = True
        self._loading = False
        return self.snapshot

    async def _settled(self) -> LoaderSnapshot[T]:
        return self.snapshot


def _is_empty(locator) -> bool:
    return locator is None or locator == ""


__all__ = ["DataLoader", "LoaderSnapshot", "LoaderStatus"]
