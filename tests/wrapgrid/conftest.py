from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Executor, Future
from typing import Any

import pytest

from wrapgrid.layout.geometry import Vec2
from wrapgrid.prefetch.payload import Payload


class ManualClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ManualExecutor(Executor):
    """Holds submitted work until `run_all()` executes it on the caller's thread."""

    def __init__(self) -> None:
        self.pending: list[tuple[Future[Any], Callable[..., Any], tuple[Any, ...]]] = []
        self.submitted = 0
        self.is_shutdown = False

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future[Any]:
        if self.is_shutdown:
            raise RuntimeError("cannot schedule new futures after shutdown")
        future: Future[Any] = Future()
        self.pending.append((future, fn, args))
        self.submitted += 1
        return future

    def run_all(self) -> int:
        jobs, self.pending = self.pending, []
        for future, fn, args in jobs:
            try:
                future.set_result(fn(*args))
            except Exception as exc:  # noqa: BLE001
                future.set_exception(exc)
        return len(jobs)

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        self.is_shutdown = True
        if cancel_futures:
            for future, _, _ in self.pending:
                future.cancel()
            self.pending = []


class ScriptedFetcher:
    def __init__(self) -> None:
        self.calls: list[tuple[str, float]] = []
        self.failures: dict[str, BaseException] = {}

    def fetch(self, url: str, timeout_seconds: float) -> bytes:
        self.calls.append((url, timeout_seconds))
        error = self.failures.get(url)
        if error is not None:
            raise error
        return f"image:{url}".encode()


class FakeCatalog:
    def __init__(self, size: int = 10) -> None:
        self.size = size

    def content_key_for_index(self, index: int) -> str:
        return f"item-{index % self.size}"

    def catalog_size(self) -> int:
        return self.size

    def url_for_index(self, index: int) -> str:
        return f"mem://{self.content_key_for_index(index)}"


class FakeTileView:
    def __init__(self, slot: int) -> None:
        self.slot = slot
        self.position = Vec2()
        self.scale = Vec2(1.0, 1.0)
        self.presented: list[Payload] = []
        self.released = False

    def get_position(self) -> Vec2:
        return self.position

    def set_position(self, position: Vec2) -> None:
        self.position = position

    def get_scale(self) -> Vec2:
        return self.scale

    def set_scale(self, scale: Vec2) -> None:
        self.scale = scale

    def present(self, payload: Payload) -> None:
        self.presented.append(payload)


class FakeViewFactory:
    def __init__(self) -> None:
        self.created: list[FakeTileView] = []

    def __call__(self, slot: int) -> FakeTileView:
        view = FakeTileView(slot)
        self.created.append(view)
        return view

    def release(self, view: FakeTileView) -> None:
        view.released = True


@pytest.fixture
def manual_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def manual_executor() -> ManualExecutor:
    return ManualExecutor()


@pytest.fixture
def scripted_fetcher() -> ScriptedFetcher:
    return ScriptedFetcher()


@pytest.fixture
def fake_catalog() -> FakeCatalog:
    return FakeCatalog(10)


@pytest.fixture
def view_factory() -> FakeViewFactory:
    return FakeViewFactory()


@pytest.fixture
def catalog_factory() -> Callable[[int], FakeCatalog]:
    return FakeCatalog
