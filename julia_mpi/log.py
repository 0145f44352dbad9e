import logging
import socket
from typing import Optional

from .config import log_level

FORMAT = "%(asctime)s - [Rank {rank}@{host}] - %(name)s - %(levelname)s - %(message)s"


def setup_logging(rank="-", level: Optional[int] = None) -> None:
    """Configure the root logger once per process, tagging lines with rank and host."""
    logging.basicConfig(
        level=log_level() if level is None else level,
        format=FORMAT.format(rank=rank, host=socket.gethostname()),
    )
