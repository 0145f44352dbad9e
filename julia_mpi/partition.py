from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class RowRange:
    start: int
    end:   int  # exclusive

    def __len__(self) -> int:
        return self.end - self.start

    def __iter__(self):
        return iter(range(self.start, self.end))


def _check(total_rows: int, worker_count: int):
    if total_rows < 1:
        raise ValueError(f"total_rows must be >= 1, got {total_rows}")
    if worker_count < 1:
        raise ValueError(f"worker_count must be >= 1, got {worker_count}")


def row_range(total_rows: int, worker_count: int, rank: int) -> RowRange:
    """
    Contiguous block of rows owned by ``rank``.

    The first ``total_rows % worker_count`` ranks get one extra row, so the
    ranges of ranks 0..worker_count-1 tile [0, total_rows) in rank order.
    """
    _check(total_rows, worker_count)
    if not 0 <= rank < worker_count:
        raise ValueError(f"rank {rank} outside [0, {worker_count})")
    base = total_rows // worker_count
    rem  = total_rows % worker_count
    start = base * rank + min(rank, rem)
    end   = start + base + (1 if rank < rem else 0)
    return RowRange(start, end)


def split_rows(total_rows: int, worker_count: int) -> Tuple[List[int], List[int]]:
    """Row counts and start rows of every rank."""
    _check(total_rows, worker_count)
    ranges = [row_range(total_rows, worker_count, k) for k in range(worker_count)]
    counts = [len(r) for r in ranges]
    starts = [r.start for r in ranges]
    return counts, starts
