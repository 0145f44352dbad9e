import sys
import logging
import multiprocessing as mp
from typing import Optional

from .block import ImageSpec, build_block
from .bmp import HEADER_SIZE, write_header
from .collective import Collective, discard_output, write_blocks
from .config import OUTFILE, TINT_BIAS
from .errors import CoordinateOutOfRange, HeaderIOError, JuliaError, RenderError
from .local import LocalCollective, LocalState, SerialCollective
from .log import setup_logging
from .partition import RowRange, row_range
from .pixel import JuliaSet

logger = logging.getLogger(__name__)


def render_worker(collective: Collective, height: int, path=OUTFILE,
                  tint_bias: float = TINT_BIAS, julia: Optional[JuliaSet] = None) -> RowRange:
    """
    Render this worker's rows and take part in the ordered write of ``path``.

    Must be called by every participant of ``collective`` with the same
    arguments. Returns the rows this worker contributed.
    """
    image = ImageSpec.from_height(height)
    rows = row_range(image.height, collective.size, collective.rank)

    logger.info("computing pixel rows %d to %d, area of %d bytes",
                rows.start, rows.end, image.block_size(rows))
    block = build_block(image, rows, tint_bias, julia)

    # Header goes first, and everyone waits for it before touching the file
    header_error = None
    if collective.rank == 0:
        try:
            write_header(path, image)
        except HeaderIOError as e:
            header_error = e
    if not collective.agree(header_error is None):
        if collective.rank == 0:
            discard_output(path)
        raise header_error or HeaderIOError(f"the header of {path} was not agreed by every worker")

    write_blocks(collective, path, HEADER_SIZE, block)
    return rows


def run_worker(collective: Collective, height: int, path=OUTFILE, tint_bias: float = TINT_BIAS,
               julia: Optional[JuliaSet] = None) -> int:
    """
    Run ``render_worker`` and turn its failures into an exit status.

    Failures every worker agreed on just return 1. Anything else leaves
    peers waiting at a barrier this worker will never reach, so the whole
    group is aborted.
    """
    try:
        render_worker(collective, height, path, tint_bias, julia)
    except CoordinateOutOfRange:
        logger.exception("pixel outside the image, aborting all workers")
        collective.abort(1)
        return 1
    except JuliaError as e:
        logger.error("%s", e)
        return 1
    except Exception:
        logger.exception("unexpected failure, aborting all workers")
        collective.abort(1)
        return 1
    return 0


def render_serial(height: int, path=OUTFILE, tint_bias: float = TINT_BIAS) -> None:
    """Whole image in the calling process."""
    render_worker(SerialCollective(), height, path, tint_bias)


def _local_worker(rank: int, size: int, state: LocalState, height: int, path: str, tint_bias: float):
    setup_logging(rank)
    sys.exit(run_worker(LocalCollective(rank, size, state), height, path, tint_bias))


def render_local(height: int, workers: int, path=OUTFILE, tint_bias: float = TINT_BIAS) -> None:
    """
    Render with ``workers`` processes on this machine, using the
    token-passing ordered write instead of MPI-IO.
    """
    ImageSpec.from_height(height)
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")

    ctx = mp.get_context()
    state = LocalState(ctx, workers)
    procs = [ctx.Process(target=_local_worker, name=f"julia-worker-{rank}",
                         args=(rank, workers, state, height, str(path), tint_bias))
             for rank in range(workers)]
    for p in procs:
        p.start()
    for p in procs:
        p.join()

    failed = [(p.name, p.exitcode) for p in procs if p.exitcode != 0]
    if failed:
        raise RenderError("worker processes failed: " +
                          ", ".join(f"{name} (exit {code})" for name, code in failed))
    logger.info("wrote %s with %d local workers", path, workers)
