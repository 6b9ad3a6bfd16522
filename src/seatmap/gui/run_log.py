from __future__ import annotations

import logging
from pathlib import Path
import sys
from typing import TextIO


LOG_FORMAT = "%(asctime)s %(message)s"


def next_run_dir(base_dir: Path) -> Path:
    base_dir.mkdir(parents=True, exist_ok=True)
    max_idx = -1
    for child in base_dir.iterdir():
        if not child.is_dir():
            continue
        try:
            idx = int(child.name)
        except ValueError:
            continue
        max_idx = max(max_idx, idx)
    run_dir = base_dir / str(max_idx + 1)
    run_dir.mkdir(parents=True, exist_ok=False)
    return run_dir


class Tee:
    def __init__(self, *streams) -> None:
        self._streams = streams

    def write(self, data: str) -> int:
        for stream in self._streams:
            stream.write(data)
            stream.flush()
        return len(data)

    def flush(self) -> None:
        for stream in self._streams:
            stream.flush()


def open_run_log(run_dir: Path) -> tuple[TextIO, logging.Handler]:
    """Send stdout, stderr and root logger records to ``run_dir/log.txt``.

    Handlers installed by ``logging.basicConfig`` keep the stream they
    were created with, so logger output gets its own handler on the file.
    """
    log_file = (run_dir / "log.txt").open("w", encoding="utf-8")
    sys.stdout = Tee(sys.stdout, log_file)
    sys.stderr = Tee(sys.stderr, log_file)
    handler = logging.StreamHandler(log_file)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(handler)
    return log_file, handler
