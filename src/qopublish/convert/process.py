"""Running and killing converter processes.

Every conversion is a blocking `subprocess.Popen` + `communicate`. The
runner remembers the processes in flight so that a failing batch can take
down its siblings, including the kernels they spawned.
"""

from __future__ import annotations

import shlex
import subprocess
import threading
import time
from typing import Sequence

import psutil
from loguru import logger

from qopublish.config import PublishConfig
from qopublish.types import ConversionError
from qopublish.util.defaults import KILL_WAIT

from .commands import converter_environment


def kill_process_tree(
    pid: int, timeout: float = KILL_WAIT, include_parent: bool = True
) -> int:
    """Kill a process and all its descendants. Returns how many were signalled.

    Leave `include_parent` off for processes we started with Popen: those are
    reaped by their own `communicate` call.
    """
    try:
        parent = psutil.Process(pid)
    except psutil.NoSuchProcess:
        logger.debug(f"Converter PID {pid} no longer exists")
        return 0

    try:
        procs = parent.children(recursive=True)
    except psutil.NoSuchProcess:
        procs = []
    if include_parent:
        procs.append(parent)

    killed = 0
    for proc in procs:
        try:
            proc.kill()
            killed += 1
        except psutil.NoSuchProcess:
            continue

    _, alive = psutil.wait_procs(procs, timeout=timeout)
    for proc in alive:
        logger.warning("Process {} did not exit after kill", proc.pid)
    return killed


class ConverterRunner:
    """Spawns converter processes and waits for them.

    The runner has no timeout of its own; the per-cell timeout is the
    converter's business.
    """

    def __init__(self, config: PublishConfig):
        self.config = config
        self._procs: set[subprocess.Popen] = set()
        self._lock = threading.Lock()
        self._aborted = threading.Event()

    @property
    def aborted(self) -> bool:
        return self._aborted.is_set()

    def running(self) -> int:
        with self._lock:
            return len(self._procs)

    def run(self, command: Sequence[str], filename: str) -> float:
        """Run one conversion to completion.

        Parameters
        ----------
        command : Sequence[str]
            Full converter command line.
        filename : str
            Notebook the command works on, for error reporting.

        Returns
        -------
        float
            Seconds the converter took.

        Raises
        ------
        ConversionError
            If the converter cannot be started, exits non-zero, or the run
            was aborted.
        """
        if self.aborted:
            raise ConversionError(
                f"Run aborted, not converting {filename}", filename=filename
            )

        command = list(command)
        logger.debug("Running converter: {}", shlex.join(command))
        start = time.perf_counter()
        try:
            proc = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=converter_environment(self.config),
            )
        except OSError as e:
            raise ConversionError(
                f"Could not start converter for {filename}: {e}",
                filename=filename,
                command=command,
            ) from e

        with self._lock:
            self._procs.add(proc)
        if self.aborted:
            self._kill(proc)
        try:
            outs, errs = proc.communicate()
        finally:
            with self._lock:
                self._procs.discard(proc)
        duration = time.perf_counter() - start

        outs = outs.decode("utf-8", errors="replace")
        errs = errs.decode("utf-8", errors="replace")
        if outs:
            logger.debug(outs)

        if proc.returncode != 0:
            logger.error("#======= Converter failed on {}, errs: =======#", filename)
            if errs:
                logger.error(errs)
            logger.error("Return code = {}", proc.returncode)
            raise ConversionError(
                f"Converter exited with status {proc.returncode} for {filename}",
                filename=filename,
                command=command,
                returncode=proc.returncode,
                stderr=errs,
            )
        # nbconvert reports progress on stderr
        if errs:
            logger.debug(errs)
        return duration

    def abort(self) -> int:
        """Stop accepting work and kill every converter still running."""
        self._aborted.set()
        with self._lock:
            procs = list(self._procs)
        killed = 0
        for proc in procs:
            killed += self._kill(proc)
        return killed

    def _kill(self, proc: subprocess.Popen) -> int:
        logger.info("Killing converter PID {}", proc.pid)
        killed = kill_process_tree(proc.pid, include_parent=False)
        proc.kill()
        return killed + 1

    def reset(self):
        self._aborted.clear()
