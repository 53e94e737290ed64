# tests/services/test_traversal_service.py
from pathlib import Path

from fshelpers.ports.filesystem import FilesystemPort
from fshelpers.services.pipeline_queue import PipelineQueue
from fshelpers.services.traversal_service import TraversalService


class ListFS(FilesystemPort):
    def __init__(self, paths):
        self.paths = [Path(p) for p in paths]
        self.walks = 0

    def walk(self, root, deadline=None, clock=None):
        self.walks += 1
        yield from self.paths

    def free_space(self, path):
        return 0


def test_single_pass_emits_everything_and_closes():
    fs = ListFS(["a", "b", "c"])
    q = PipelineQueue(10)

    assert TraversalService(fs).run(Path("root"), q) == 3
    assert q.closed
    assert list(q) == [Path("a"), Path("b"), Path("c")]


def test_deadline_restarts_walk_from_root():
    fs = ListFS(["a", "b", "c"])
    q = PipelineQueue(100)
    ticks = iter(range(100))

    emitted = TraversalService(fs, clock=lambda: next(ticks)).run(Path("root"), q, deadline=3)

    assert fs.walks == 3
    assert emitted == 9
    assert list(q) == [Path(p) for p in "abc" * 3]


def test_empty_tree_with_deadline_terminates():
    fs = ListFS([])
    q = PipelineQueue(1)
    ticks = iter(range(100))

    emitted = TraversalService(fs, clock=lambda: next(ticks), idle_pause=0).run(
        Path("root"), q, deadline=5
    )

    assert emitted == 0
    assert q.closed


def test_queue_closed_when_walk_raises():
    class BrokenFS(ListFS):
        def walk(self, root, deadline=None, clock=None):
            raise RuntimeError("boom")
            yield  # pragma: no cover

    q = PipelineQueue(1)
    try:
        TraversalService(BrokenFS([])).run(Path("root"), q)
    except RuntimeError:
        pass
    assert q.closed
