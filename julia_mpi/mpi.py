import numpy as np
from mpi4py import MPI

from .collective import Collective, OrderedWriter
from .errors import CollectiveWriteError


class MPIOrderedWriter(OrderedWriter):
    """MPI-IO file whose shared pointer serializes the writes by rank."""

    def __init__(self, comm, path):
        self.path = str(path)
        try:
            self.fh = MPI.File.Open(comm, self.path, MPI.MODE_WRONLY)
        except MPI.Exception as e:
            raise CollectiveWriteError(f"cannot open {self.path} for the ordered write: {e}") from e

    def seek(self, offset: int) -> None:
        # Collective; on failure the handle stays open until every rank has agreed
        try:
            self.fh.Seek_shared(offset, MPI.SEEK_SET)
        except MPI.Exception as e:
            raise CollectiveWriteError(f"cannot move the shared pointer of {self.path} to {offset}: {e}") from e

    def write_ordered(self, buffer: np.ndarray) -> None:
        block = np.ascontiguousarray(buffer, dtype=np.uint8)
        try:
            self.fh.Write_ordered([block, MPI.UNSIGNED_CHAR])
            self.fh.Sync()
        except MPI.Exception as e:
            raise CollectiveWriteError(f"ordered write to {self.path} failed: {e}") from e

    def close(self) -> None:
        if self.fh is None:
            return
        try:
            self.fh.Close()
        except MPI.Exception as e:
            raise CollectiveWriteError(f"closing {self.path} failed: {e}") from e
        finally:
            self.fh = None


class MPICollective(Collective):
    def __init__(self, comm=None):
        self.comm = comm if comm is not None else MPI.COMM_WORLD
        self.rank = self.comm.Get_rank()
        self.size = self.comm.Get_size()

    def agree(self, ok: bool) -> bool:
        return bool(self.comm.allreduce(bool(ok), op=MPI.LAND))

    def open_ordered(self, path) -> MPIOrderedWriter:
        return MPIOrderedWriter(self.comm, path)

    def abort(self, code: int = 1) -> None:
        self.comm.Abort(code)

    def wtime(self) -> float:
        return MPI.Wtime()
