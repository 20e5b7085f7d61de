"""
Runs a batch of artifacts concurrently, one thread per artifact, and signals
once when every artifact has finished.
"""
import threading
from typing import Callable, Iterable, Optional, Union

from plugfetch.internal.logging import get_logger
from plugfetch.kernel.artifacts import Artifact, CascadeResult, CascadeState
from plugfetch.kernel.cascade import CascadeEngine

logger = get_logger(__name__)


class CompletionCounter:
    """
    Outstanding-work counter with an atomic decrement-and-test.
    """

    def __init__(self, total: int):
        if total < 0:
            raise ValueError("total cannot be negative")
        self._remaining = total
        self._lock = threading.Lock()

    @property
    def remaining(self) -> int:
        with self._lock:
            return self._remaining

    def decrement(self) -> bool:
        """
        Returns True for exactly one caller: the one that reaches zero.
        """
        with self._lock:
            if self._remaining <= 0:
                raise RuntimeError("counter decremented below zero")
            self._remaining -= 1
            return self._remaining == 0


class BatchCoordinator:
    def __init__(
        self,
        engine: CascadeEngine,
        artifacts: Union[Artifact, Iterable[Artifact]],
        on_complete: Optional[Callable[[list[CascadeResult]], None]] = None,
        on_worker_exit: Optional[Callable[[], None]] = None,
    ):
        if isinstance(artifacts, Artifact):
            artifacts = [artifacts]
        self.engine = engine
        self.artifacts = list(artifacts)
        self.on_complete = on_complete
        self.on_worker_exit = on_worker_exit
        self.counter = CompletionCounter(len(self.artifacts))
        self.completed = threading.Event()
        self.results: list[Optional[CascadeResult]] = [None] * len(self.artifacts)
        self._threads: list[threading.Thread] = []
        self._started = False

    def start(self) -> None:
        if self._started:
            raise RuntimeError("batch already started")
        self._started = True

        if not self.artifacts:
            self._finish()
            return

        for index, artifact in enumerate(self.artifacts):
            thread = threading.Thread(
                target=self._work,
                args=(index, artifact),
                name=f"plugfetch-{artifact.name}",
            )
            self._threads.append(thread)
            thread.start()

    def wait(self, timeout: Optional[float] = None) -> list[CascadeResult]:
        if not self.completed.wait(timeout):
            raise TimeoutError(f"{self.counter.remaining} plugin(s) still processing")
        for thread in self._threads:
            thread.join()
        return list(self.results)

    def run(self, timeout: Optional[float] = None) -> list[CascadeResult]:
        self.start()
        return self.wait(timeout)

    def _work(self, index: int, artifact: Artifact) -> None:
        try:
            self.results[index] = self.engine.run(artifact)
        except Exception as e:
            logger.exception("Unexpected error while processing plugin", artifact=artifact.name)
            self.results[index] = CascadeResult(
                name=artifact.name,
                state=CascadeState.FAILED,
                destination=artifact.destination,
                error=e,
            )
        finally:
            try:
                if self.on_worker_exit is not None:
                    self.on_worker_exit()
            finally:
                if self.counter.decrement():
                    self._finish()

    def _finish(self) -> None:
        logger.info(
            f"All {len(self.artifacts)} plugins have been processed! "
            "Please resolve any errors and then restart the server.",
            total=len(self.artifacts),
        )
        try:
            if self.on_complete is not None:
                self.on_complete(list(self.results))
        finally:
            self.completed.set()
