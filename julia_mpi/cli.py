"""
Command line entry point.

    mpirun -n 4 python -m julia_mpi N

renders a 2N x N Julia set into out_julia_mpi.bmp using every MPI process.
"""
import sys
import logging

from .block import ImageSpec
from .config import OUTFILE, TINT_BIAS
from .errors import InvalidInput
from .log import setup_logging
from .render import run_worker

logger = logging.getLogger(__name__)

USAGE = "Enter 'N' as a positive integer! (usage: mpirun -n <procs> julia-mpi N)"


def parse_height(argv) -> int:
    if len(argv) != 1:
        raise InvalidInput(USAGE)
    try:
        height = int(argv[0])
    except ValueError:
        raise InvalidInput(f"{argv[0]!r} is not an integer. {USAGE}") from None
    if height < 1:
        raise InvalidInput(f"{height} is not positive. {USAGE}")
    try:
        ImageSpec.from_height(height)
    except ValueError as e:
        raise InvalidInput(f"{height} is too large: {e}") from None
    return height


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    # Validate before MPI starts so a bad argument never creates the file
    try:
        height = parse_height(argv)
    except InvalidInput as e:
        setup_logging()
        logger.error("%s", e)
        return 1

    from .mpi import MPICollective
    collective = MPICollective()
    setup_logging(collective.rank)

    if collective.rank == 0:
        logger.info("rendering a %dx%d Julia set with %d processes into %s",
                    2 * height, height, collective.size, OUTFILE)

    deb = collective.wtime()
    status = run_worker(collective, height, OUTFILE, TINT_BIAS)
    fin = collective.wtime()

    if status == 0 and collective.rank == 0:
        logger.info("total time: %.4f s with %d processes", fin - deb, collective.size)
    return status
