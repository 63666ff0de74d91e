"""Run transforms off the caller's thread with last-writer-wins delivery.

Every :meth:`TransformSession.submit` starts an independent computation on
its own decoded copy of the upload and bumps the session generation. When a
computation finishes, its result is delivered only if no newer request has
been submitted meanwhile; stale results are dropped. Nothing running is
cancelled.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .config import EditorConfig
from .effects import Effect
from .pipeline import normalize, output_filename, transform
from .utils.loader import EncodedImage, ImageSource

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformResult:
    """Encoded output of one request, tagged with its generation."""

    generation: int
    effect: str
    image: EncodedImage
    filename: str


ReadyCallback = Callable[[TransformResult], None]
ErrorCallback = Callable[[int, BaseException], None]


class TransformSession:
    """Owns the generation counter and the worker pool for one editor."""

    def __init__(
        self,
        executor: Optional[Executor] = None,
        config: Optional[EditorConfig] = None,
    ) -> None:
        self.config = (config or EditorConfig()).validate()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="styleforge"
        )
        self._lock = threading.Lock()
        self._generation = 0
        self._latest: Optional[TransformResult] = None

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def latest(self) -> Optional[TransformResult]:
        """Most recent result that was still current when it finished."""
        with self._lock:
            return self._latest

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def submit(
        self,
        source: ImageSource,
        effect: Union[Effect, str],
        on_ready: Optional[ReadyCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> "Future[TransformResult]":
        """Queue normalize + transform of ``source`` with ``effect``.

        Returns the worker future. ``on_ready``/``on_error`` run on the worker
        thread and only for requests that have not been superseded.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation

        future = self._executor.submit(self._run, generation, source, effect)
        future.add_done_callback(
            lambda f: self._deliver(generation, f, on_ready, on_error)
        )
        return future

    def reset(self) -> None:
        """Supersede everything in flight and forget the last result."""
        with self._lock:
            self._generation += 1
            self._latest = None

    def shutdown(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def _run(self, generation: int, source: ImageSource, effect: Union[Effect, str]) -> TransformResult:
        cfg = self.config
        normalized = normalize(source, max_width=cfg.max_width, quality=cfg.preview_quality)
        image = transform(normalized, effect, quality=cfg.output_quality)
        return TransformResult(
            generation=generation,
            effect=str(effect),
            image=image,
            filename=output_filename(effect),
        )

    def _deliver(
        self,
        generation: int,
        future: "Future[TransformResult]",
        on_ready: Optional[ReadyCallback],
        on_error: Optional[ErrorCallback],
    ) -> None:
        exc = future.exception()
        with self._lock:
            current = generation == self._generation
            if current and exc is None:
                self._latest = future.result()

        if not current:
            _LOGGER.debug("dropping result of superseded request %d", generation)
            return
        if exc is not None:
            _LOGGER.error("transform request %d failed: %s", generation, exc)
            if on_error is not None:
                on_error(generation, exc)
            return
        if on_ready is not None:
            on_ready(future.result())
