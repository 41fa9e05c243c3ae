# core/persistence.py
# Binary Q-table files:
#   offset 0: int32 W
#   offset 4: int32 H
#   offset 8: float32[W*H*4]  row-major by state (y*W + x), then action 0..3
# Little-endian throughout. No magic, version or action-count field, so a file written with a
# different number of actions but the same W, H is read back silently wrong.
from __future__ import annotations
import logging
import os
import tempfile
import numpy as np
from core.errors import FormatError, TableIOError
from core.qtable import QTable
from envs.grid import N_ACTIONS

logger = logging.getLogger(__name__)

HEADER_DTYPE = np.dtype("<i4")
VALUE_DTYPE = np.dtype("<f4")
HEADER_BYTES = 2 * HEADER_DTYPE.itemsize


def encode_qtable(m: QTable) -> bytes:
    header = np.array([m.width, m.height], dtype=HEADER_DTYPE)
    return header.tobytes() + m.flat().astype(VALUE_DTYPE).tobytes()


def decode_qtable(data: bytes) -> QTable:
    if len(data) < HEADER_BYTES:
        raise FormatError(f"Q-table file holds {len(data)} bytes, header needs {HEADER_BYTES}")
    w, h = (int(v) for v in np.frombuffer(data, dtype=HEADER_DTYPE, count=2))
    if w <= 0 or h <= 0:
        raise FormatError(f"Q-table header declares a {w}x{h} grid")
    n = w * h * N_ACTIONS
    need = HEADER_BYTES + n * VALUE_DTYPE.itemsize
    if len(data) < need:
        raise FormatError(f"Q-table file is truncated: {len(data)} bytes, {w}x{h} header needs {need}")
    q = np.frombuffer(data, dtype=VALUE_DTYPE, count=n, offset=HEADER_BYTES)
    return QTable(w, h, q.astype(np.float32))


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def save_qtable(path: str, m: QTable) -> None:
    """Write m to path. The file is replaced atomically, so a failed save leaves no partial table."""
    data = encode_qtable(m)
    directory = os.path.dirname(os.path.abspath(path))
    tmp = None
    try:
        fd, tmp = tempfile.mkstemp(prefix=".qtable-", dir=directory)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        # mkstemp creates 0600; give the table the mode a plain open() would
        os.chmod(tmp, 0o666 & ~_current_umask())
        os.replace(tmp, path)
        tmp = None
    except OSError as e:
        raise TableIOError(f"Cannot write Q-table to {path}: {e}") from e
    finally:
        if tmp is not None and os.path.exists(tmp):
            os.remove(tmp)
    logger.info("Saved Q-table %dx%d to %s", m.width, m.height, path)


def load_qtable(path: str) -> QTable:
    """Read a table from path. The caller checks its size against the environment in use."""
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise TableIOError(f"Failed to load Q-table from {path}: {e}") from e
    m = decode_qtable(data)
    logger.info("Loaded Q-table %dx%d from %s", m.width, m.height, path)
    return m
