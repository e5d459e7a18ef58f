"""Pull-mode stream and materialized index over a quad sequence."""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, Protocol

from .terms import Node, Quad


class StreamClosedError(RuntimeError):
    """Raised when reading from a stream that has already ended."""


class QuadSink(Protocol):
    def write(self, quad: Quad) -> bool: ...

    def end(self) -> None: ...


class QuadStream:
    """Demand-driven source over a lazy quad sequence.

    Each ``read()`` pulls at most one quad. The end of the sequence is
    signalled once: ``read()`` returns ``None``, ``ended`` becomes true and
    the ``on_end`` callbacks run. An error raised by the source propagates
    from ``read()`` and closes the stream without signalling the end. The
    stream cannot be restarted.
    """

    def __init__(self, quads: Iterable[Quad]):
        self._source: Iterator[Quad] | None = iter(quads)
        self._end_callbacks: list[Callable[[], None]] = []
        self._sink: QuadSink | None = None
        self._paused = False
        self.ended = False
        self.failed = False
        self.count = 0

    def on_end(self, callback: Callable[[], None]) -> None:
        """Register a callback run once after the last quad."""
        self._end_callbacks.append(callback)

    def read(self) -> Quad | None:
        """Pull the next quad, or return ``None`` once the sequence is exhausted."""
        if self._source is None:
            if self.failed:
                raise StreamClosedError("quad stream was closed by a source error")
            raise StreamClosedError("quad stream has already ended")
        try:
            quad = next(self._source)
        except StopIteration:
            self._finish()
            return None
        except Exception:
            self._source = None
            self.failed = True
            self._end_callbacks = []
            raise
        self.count += 1
        return quad

    def _finish(self) -> None:
        self._source = None
        self.ended = True
        callbacks, self._end_callbacks = self._end_callbacks, []
        for callback in callbacks:
            callback()

    def __iter__(self) -> Iterator[Quad]:
        return self

    def __next__(self) -> Quad:
        if self.ended:
            raise StopIteration
        quad = self.read()
        if quad is None:
            raise StopIteration
        return quad

    @property
    def paused(self) -> bool:
        """Whether the pipe is waiting for ``resume()``."""
        return self._paused

    def pipe(self, sink: QuadSink) -> QuadSink:
        """Push quads into ``sink`` until it reports a full buffer or the stream ends.

        A ``False`` return from ``sink.write`` pauses the pipe; call
        ``resume()`` once the sink has room again. ``sink.end()`` is called
        after the last quad.
        """
        if self._sink is not None:
            raise RuntimeError("quad stream is already piped")
        self._sink = sink
        self.on_end(sink.end)
        self.resume()
        return sink

    def resume(self) -> None:
        """Push quads to the piped sink until it is full or the stream ends."""
        if self._sink is None:
            raise RuntimeError("quad stream is not piped")
        self._paused = False
        while not self.ended and not self.failed:
            quad = self.read()
            if quad is None:
                return
            if self._sink.write(quad) is False:
                self._paused = True
                return


class QuadStore:
    """Read-only in-memory quad index supporting pattern lookup.

    Duplicate quads are stored once; ``match`` returns quads in the order
    they were first added.
    """

    def __init__(self, quads: Iterable[Quad] = ()):
        self._quads: set[Quad] = set()
        self._indexes: tuple[dict[Node, list[int]], ...] = ({}, {}, {}, {})
        self._ordered: list[Quad] = []
        for quad in quads:
            if quad in self._quads:
                continue
            position = len(self._ordered)
            self._quads.add(quad)
            self._ordered.append(quad)
            for index, term in zip(self._indexes, quad):
                index.setdefault(term, []).append(position)

    @classmethod
    def from_quads(cls, quads: Iterable[Quad]) -> QuadStore:
        """Drain ``quads`` into a new store."""
        return cls(quads)

    def __len__(self) -> int:
        return len(self._ordered)

    def __contains__(self, quad: object) -> bool:
        return quad in self._quads

    def __iter__(self) -> Iterator[Quad]:
        return iter(self._ordered)

    def match(
        self,
        subject: Node | None = None,
        predicate: Node | None = None,
        obj: Node | None = None,
        graph: Node | None = None,
    ) -> list[Quad]:
        """Return quads matching the pattern; ``None`` matches any term."""
        pattern = (subject, predicate, obj, graph)
        bound = [(i, term) for i, term in enumerate(pattern) if term is not None]
        if not bound:
            return list(self._ordered)

        candidates: list[int] | None = None
        for i, term in bound:
            positions = self._indexes[i].get(term, [])
            if candidates is None or len(positions) < len(candidates):
                candidates = positions
        return [
            self._ordered[position]
            for position in candidates
            if all(self._ordered[position][i] == term for i, term in bound)
        ]

    def graphs(self) -> list[Node]:
        """Return the graph terms in first-seen order."""
        return list(self._indexes[3])
