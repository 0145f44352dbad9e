"""
Ordered collective write of the per-worker pixel blocks.

Every participant hands exactly one buffer to ``write_blocks``; the
backend appends the buffers after the header in ascending rank order,
whatever the order in which workers arrive. Backends only need three
primitives: rank/size discovery, an all-participants agreement
(barrier reporting whether everybody succeeded) and the ordered append.
"""
import abc
import logging
from pathlib import Path

import numpy as np

from .errors import CollectiveWriteError

logger = logging.getLogger(__name__)


class OrderedWriter(abc.ABC):
    """Shared output file opened by every participant of a collective."""

    @abc.abstractmethod
    def seek(self, offset: int) -> None:
        """Place the first ordered append at ``offset``; called by every participant."""

    @abc.abstractmethod
    def write_ordered(self, buffer: np.ndarray) -> None:
        """Append ``buffer`` after every lower rank's buffer and flush it to storage."""

    @abc.abstractmethod
    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class Collective(abc.ABC):
    rank: int
    size: int

    @abc.abstractmethod
    def agree(self, ok: bool) -> bool:
        """Block until every participant arrives; True only if all of them passed ok=True."""

    @abc.abstractmethod
    def open_ordered(self, path) -> OrderedWriter:
        """Open ``path`` on every participant; succeeds or fails on all of them."""

    @abc.abstractmethod
    def abort(self, code: int = 1) -> None:
        """Stop every participant; used for failures the others cannot agree on."""


def as_bytes(buffer: np.ndarray) -> np.ndarray:
    return np.ascontiguousarray(buffer, dtype=np.uint8).reshape(-1)


def discard_output(path) -> None:
    """Remove a partially written output so it cannot pass for a finished image."""
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as e:
        logger.warning("could not remove incomplete output %s: %s", path, e)


def _failed(collective: Collective, path, error, stage: str):
    if collective.rank == 0:
        discard_output(path)
    if error is not None:
        raise error
    raise CollectiveWriteError(f"another worker failed during the ordered {stage} of {path}")


def _close_quietly(writer: OrderedWriter):
    try:
        writer.close()
    except CollectiveWriteError as e:
        logger.warning("%s", e)


def write_blocks(collective: Collective, path, offset: int, buffer: np.ndarray) -> None:
    """
    Collectively append ``buffer`` of every rank to ``path`` at ``offset``.

    Must be called by all participants. Either every rank returns and the
    file holds all buffers in rank order, or every rank raises
    CollectiveWriteError and rank 0 removes the file.
    """
    error = None
    writer = None
    try:
        writer = collective.open_ordered(path)
        writer.seek(offset)
    except CollectiveWriteError as e:
        logger.error("%s", e)
        error = e
    if not collective.agree(error is None):
        # Collective close, only once every rank has agreed
        if writer is not None:
            _close_quietly(writer)
        _failed(collective, path, error, "open")

    try:
        writer.write_ordered(buffer)
    except CollectiveWriteError as e:
        logger.error("%s", e)
        error = e
    finally:
        try:
            writer.close()
        except CollectiveWriteError as e:
            error = error or e
    if not collective.agree(error is None):
        _failed(collective, path, error, "write")

    logger.debug("appended %d bytes in rank order to %s", buffer.nbytes, path)
