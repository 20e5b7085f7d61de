import threading

import pytest
from structlog.testing import capture_logs

from plugfetch.adapters.platforms import BukkitResolver, ExternalResolver, ManualResolver
from plugfetch.kernel.artifacts import CascadeState, Disqualified, Platform, Resolved
from plugfetch.kernel.batch import BatchCoordinator, CompletionCounter
from plugfetch.kernel.cascade import CascadeEngine
from tests.kernel.mocks import RecordingFetcher, ScriptedResolver

COMPLETE_PREFIX = "All "


def _completion_events(logs):
    return [e for e in logs if e["event"].startswith(COMPLETE_PREFIX) and "processed" in e["event"]]


@pytest.fixture
def engine(host_version):
    resolvers = {
        Platform.MODRINTH: ScriptedResolver(Disqualified("offline")),
        Platform.SPIGOT: ScriptedResolver(Resolved("https://spigot.test/download")),
        Platform.BUKKIT: BukkitResolver(),
        Platform.EXTERNAL: ExternalResolver(),
        Platform.MANUAL: ManualResolver(),
    }
    return CascadeEngine(resolvers=resolvers, fetcher=RecordingFetcher(), host_version=host_version)


# --- CompletionCounter ---

def test_counter_reports_zero_exactly_once():
    counter = CompletionCounter(3)
    assert [counter.decrement() for _ in range(3)] == [False, False, True]
    assert counter.remaining == 0

def test_counter_refuses_to_go_negative():
    counter = CompletionCounter(1)
    counter.decrement()
    with pytest.raises(RuntimeError, match="below zero"):
        counter.decrement()

def test_counter_under_concurrent_decrement():
    total = 200
    counter = CompletionCounter(total)
    zero_hits = []
    barrier = threading.Barrier(total)

    def worker():
        barrier.wait()
        if counter.decrement():
            zero_hits.append(True)

    threads = [threading.Thread(target=worker) for _ in range(total)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert counter.remaining == 0
    assert zero_hits == [True]


# --- BatchCoordinator ---

def test_batch_emits_exactly_one_completion_notice(engine, make_artifact):
    artifacts = [
        make_artifact(name="Exhausted", modrinth="abc"),
        make_artifact(name="Manual", manual="http://x"),
        make_artifact(name="Fetched", spigot="1"),
    ] + [make_artifact(name=f"Bulk{i}", bukkit=f"slug-{i}") for i in range(20)]

    with capture_logs() as logs:
        results = BatchCoordinator(engine, artifacts).run(timeout=30)

    completions = _completion_events(logs)
    assert len(completions) == 1
    assert completions[0]["total"] == 23
    assert completions[0]["log_level"] == "info"
    assert [r.name for r in results] == [a.name for a in artifacts]
    assert results[0].state is CascadeState.FAILED
    assert results[1].state is CascadeState.MANUAL_ONLY
    assert results[2].state is CascadeState.SUCCEEDED

def test_single_artifact_is_accepted(engine, make_artifact):
    results = BatchCoordinator(engine, make_artifact(bukkit="slug")).run(timeout=10)
    assert len(results) == 1
    assert results[0].succeeded

def test_empty_batch_completes_immediately(engine):
    with capture_logs() as logs:
        coordinator = BatchCoordinator(engine, [])
        results = coordinator.run(timeout=1)

    assert results == []
    assert coordinator.completed.is_set()
    assert _completion_events(logs)[0]["total"] == 0

def test_unexpected_error_still_counts_down(host_version, make_artifact):
    class ExplodingResolver:
        def resolve(self, candidate, context):
            raise KeyError("boom")

    resolvers = {
        Platform.MODRINTH: ExplodingResolver(),
        Platform.SPIGOT: ScriptedResolver(Resolved("u")),
        Platform.BUKKIT: BukkitResolver(),
        Platform.EXTERNAL: ExternalResolver(),
        Platform.MANUAL: ManualResolver(),
    }
    engine = CascadeEngine(resolvers=resolvers, fetcher=RecordingFetcher(), host_version=host_version)

    with capture_logs() as logs:
        results = BatchCoordinator(engine, [
            make_artifact(name="Broken", modrinth="abc"),
            make_artifact(name="Fine", bukkit="slug"),
        ]).run(timeout=10)

    assert results[0].state is CascadeState.FAILED
    assert isinstance(results[0].error, KeyError)
    assert results[1].succeeded
    assert len(_completion_events(logs)) == 1

def test_on_complete_receives_all_results(engine, make_artifact):
    received = []
    coordinator = BatchCoordinator(
        engine,
        [make_artifact(name="A", bukkit="a"), make_artifact(name="B", manual="http://b")],
        on_complete=received.append,
    )
    coordinator.run(timeout=10)

    assert len(received) == 1
    assert sorted(r.name for r in received[0]) == ["A", "B"]

def test_batch_cannot_start_twice(engine, make_artifact):
    coordinator = BatchCoordinator(engine, [make_artifact(bukkit="a")])
    coordinator.run(timeout=10)
    with pytest.raises(RuntimeError, match="already started"):
        coordinator.start()

def test_worker_exit_hook_runs_in_every_worker_thread(engine, make_artifact):
    exited = []
    lock = threading.Lock()

    def on_exit():
        with lock:
            exited.append(threading.current_thread().name)

    BatchCoordinator(
        engine,
        [make_artifact(name="A", bukkit="a"), make_artifact(name="B", manual="http://b")],
        on_worker_exit=on_exit,
    ).run(timeout=10)

    assert sorted(exited) == ["plugfetch-A", "plugfetch-B"]

@pytest.mark.filterwarnings("ignore::pytest.PytestUnhandledThreadExceptionWarning")
def test_failing_worker_exit_hook_still_counts_down(engine, make_artifact):
    def on_exit():
        raise RuntimeError("close failed")

    coordinator = BatchCoordinator(engine, [make_artifact(bukkit="a")], on_worker_exit=on_exit)
    results = coordinator.run(timeout=10)

    assert results[0].succeeded
    assert coordinator.counter.remaining == 0
