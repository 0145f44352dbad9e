"""
Single-machine collectives: an in-process one for a lone worker, and a
multiprocessing one that passes a rank-ordered token around the workers
sharing the output file.
"""
import os
import threading

import numpy as np

from .collective import Collective, OrderedWriter, as_bytes
from .errors import CollectiveWriteError


class FileOrderedWriter(OrderedWriter):
    """Plain file opened in place; subclasses decide when it is this rank's turn."""

    def __init__(self, path):
        self.path = str(path)
        self.offset = 0
        try:
            self.f = open(self.path, "r+b")
        except OSError as e:
            raise CollectiveWriteError(f"cannot open {self.path} for the ordered write: {e}") from e

    def seek(self, offset: int) -> None:
        self.offset = offset

    def _append(self, position: int, data: np.ndarray) -> None:
        try:
            self.f.seek(position)
            self.f.write(data)
            self.f.flush()
            os.fsync(self.f.fileno())
        except OSError as e:
            raise CollectiveWriteError(f"ordered write to {self.path} failed: {e}") from e

    def write_ordered(self, buffer: np.ndarray) -> None:
        self._append(self.offset, as_bytes(buffer))

    def close(self) -> None:
        try:
            self.f.close()
        except OSError as e:
            raise CollectiveWriteError(f"closing {self.path} failed: {e}") from e


class SerialCollective(Collective):
    """The only participant of a one-worker run."""
    rank = 0
    size = 1

    def agree(self, ok: bool) -> bool:
        return bool(ok)

    def open_ordered(self, path) -> FileOrderedWriter:
        return FileOrderedWriter(path)

    def abort(self, code: int = 1) -> None:
        # Nobody else waits on a lone worker
        pass


class LocalState:
    """Synchronization objects shared by the worker processes of one run."""

    def __init__(self, ctx, size: int):
        self.size = size
        self.barrier = ctx.Barrier(size)
        self.failed = ctx.Value("b", 0)
        self.turn = ctx.Value("i", 0)      # rank allowed to append next
        self.written = ctx.Value("q", 0)   # bytes appended after the header so far
        self.token = ctx.Condition()


class TokenOrderedWriter(FileOrderedWriter):
    def __init__(self, rank: int, state: LocalState, path):
        super().__init__(path)
        self.rank = rank
        self.state = state

    def _my_turn(self) -> bool:
        return self.state.turn.value == self.rank or self.state.barrier.broken

    def write_ordered(self, buffer: np.ndarray) -> None:
        state = self.state
        data = as_bytes(buffer)
        with state.token:
            state.token.wait_for(self._my_turn)
            if state.turn.value != self.rank:
                raise CollectiveWriteError(f"ordered write to {self.path} aborted before rank {self.rank}'s turn")
        try:
            self._append(self.offset + state.written.value, data)
            state.written.value += data.nbytes
        finally:
            # Pass the token even on failure so higher ranks reach the agreement
            with state.token:
                state.turn.value += 1
                state.token.notify_all()


class LocalCollective(Collective):
    def __init__(self, rank: int, size: int, state: LocalState):
        if not 0 <= rank < size or size != state.size:
            raise ValueError(f"rank {rank} does not belong to a group of {state.size}")
        self.rank = rank
        self.size = size
        self.state = state

    def agree(self, ok: bool) -> bool:
        if not ok:
            with self.state.failed.get_lock():
                self.state.failed.value = 1
        try:
            self.state.barrier.wait()
        except threading.BrokenBarrierError:
            return False
        return not self.state.failed.value

    def open_ordered(self, path) -> TokenOrderedWriter:
        return TokenOrderedWriter(self.rank, self.state, path)

    def abort(self, code: int = 1) -> None:
        with self.state.failed.get_lock():
            self.state.failed.value = 1
        self.state.barrier.abort()
        with self.state.token:
            self.state.token.notify_all()
