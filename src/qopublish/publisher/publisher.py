"""Convert notebooks and publish the results.

A run goes through four steps:

1. make sure the script and markdown output directories exist
2. find the notebooks in the source directory
3. convert every notebook twice: to a script, then (executing it) to
   markdown
4. copy the markdown directory and the code snippets directory over the
   documentation and website destinations

Any failure aborts the run. Whatever was written before the failure stays
on disk.
"""

from __future__ import annotations

import os
import shutil
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from loguru import logger
from tqdm.auto import tqdm

from qopublish.config import PublishConfig
from qopublish.convert import (
    ConverterRunner,
    derive_output_names,
    markdown_command,
    script_command,
)
from qopublish.types import (
    BatchReport,
    BatchState,
    ConversionError,
    FileState,
    PublishError,
)


def _now() -> str:
    return datetime.now().isoformat(timespec="seconds")


class Publisher:
    """Runs the notebook conversion and publish pipeline.

    Parameters
    ----------
    config : PublishConfig
        Paths, kernel and converter settings.
    runner : ConverterRunner, optional
        Runs the converter processes, by default a new one for `config`.
    progress : bool, optional
        Show a progress bar while converting, by default True.
    """

    def __init__(
        self,
        config: PublishConfig,
        runner: Optional[ConverterRunner] = None,
        progress: bool = True,
    ):
        self.config = config
        self.runner = runner if runner is not None else ConverterRunner(config)
        self.progress = progress
        self.report = BatchReport()

    # =========================================================================
    # Setup and discovery
    # =========================================================================

    def ensure_output_dirs(self):
        """Create the script and markdown output directories if absent."""
        for label, path in (
            ("script", self.config.script_path),
            ("markdown", self.config.markdown_path),
        ):
            if not path.is_dir():
                logger.info('Creating {} output directory at "{}"', label, path)
            path.mkdir(parents=True, exist_ok=True)

    def discover(self) -> list[str]:
        """Notebook filenames in the source directory, in listing order."""
        source = self.config.source_path
        if not source.is_dir():
            raise FileNotFoundError(f"Notebook source directory not found: {source}")
        names = [
            name
            for name in os.listdir(source)
            if name.endswith(self.config.notebook_ext) and (source / name).is_file()
        ]
        logger.info("Found {} notebook(s) in {}", len(names), source)
        return names

    def output_paths(self, filename: str) -> tuple[Path, Path]:
        script_name, markdown_name = derive_output_names(filename, self.config)
        return (
            self.config.script_path / script_name,
            self.config.markdown_path / markdown_name,
        )

    def output_status(self) -> list[tuple[str, bool, bool]]:
        """(filename, script exists, markdown exists) for every notebook."""
        status = []
        for name in sorted(self.discover()):
            script, markdown = self.output_paths(name)
            status.append((name, script.exists(), markdown.exists()))
        return status

    # =========================================================================
    # Per-file conversion
    # =========================================================================

    def should_skip(self, filename: str) -> bool:
        """True if overwrite is off and the markdown output already exists."""
        if self.config.overwrite:
            return False
        _, markdown = self.output_paths(filename)
        return markdown.exists()

    def convert_to_script(self, filename: str) -> float:
        source = self.config.source_path / filename
        logger.info("Converting {} to script", filename)
        return self.runner.run(script_command(source, self.config), filename)

    def convert_to_markdown(self, filename: str) -> float:
        source = self.config.source_path / filename
        logger.info("Executing {} and converting to markdown", filename)
        return self.runner.run(markdown_command(source, self.config), filename)

    def process(self, filename: str) -> FileState:
        """Convert one notebook, or skip it. Returns its final state."""
        rec = self.report.record(filename)
        if self.should_skip(filename):
            logger.info("Skipping {}, markdown output exists", filename)
            rec.state = FileState.SKIPPED
            return rec.state

        try:
            rec.duration += self.convert_to_script(filename)
            rec.state = FileState.SCRIPT_CONVERTED
            rec.duration += self.convert_to_markdown(filename)
            rec.state = FileState.MARKDOWN_CONVERTED
        except ConversionError as e:
            rec.error = str(e)
            # siblings killed by an abort keep the state they reached
            if not self.runner.aborted:
                rec.state = FileState.FAILED
            raise
        logger.success("Converted {} in {:.1f}s", filename, rec.duration)
        return rec.state

    # =========================================================================
    # Batch
    # =========================================================================

    def convert_all(self, filenames: Optional[Iterable[str]] = None) -> BatchReport:
        """Convert every notebook, sequentially or on a worker pool.

        All tasks are joined before returning. The first failure cancels the
        remaining work, kills running converters and is re-raised.
        """
        if filenames is None:
            filenames = self.discover()
        filenames = list(filenames)
        # records are created up front so workers only touch their own
        for name in filenames:
            self.report.record(name)

        self.report.state = BatchState.CONVERTING
        workers = min(self.config.workers, max(len(filenames), 1))
        logger.info(
            "Converting {} notebook(s) with {} worker(s)", len(filenames), workers
        )
        try:
            if workers == 1:
                self._convert_sequential(filenames)
            else:
                self._convert_concurrent(filenames, workers)
        except BaseException as e:
            self._mark_aborted(e)
            raise
        return self.report

    def _convert_sequential(self, filenames: list[str]):
        for name in tqdm(
            filenames, desc="convert", unit=" nb", ascii=True, disable=not self.progress
        ):
            self.process(name)

    def _convert_concurrent(self, filenames: list[str], workers: int):
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="qopublish"
        ) as executor:
            futures = {executor.submit(self.process, name): name for name in filenames}
            try:
                for future in tqdm(
                    as_completed(futures),
                    total=len(futures),
                    desc="convert",
                    unit=" nb",
                    ascii=True,
                    disable=not self.progress,
                ):
                    future.result()
            except BaseException:
                for future in futures:
                    future.cancel()
                killed = self.runner.abort()
                if killed:
                    logger.warning("Killed {} running converter process(es)", killed)
                raise

    def _mark_aborted(self, error: BaseException):
        self.report.state = BatchState.ABORTED
        self.report.error = str(error) or type(error).__name__
        self.report.finished = _now()
        logger.error("Run aborted: {}", self.report.error)

    # =========================================================================
    # Publishing
    # =========================================================================

    def publish_dir(self, source: Path, destination: Path) -> Path:
        """Copy `source` over `destination`, overwriting colliding files."""
        source, destination = Path(source), Path(destination)
        if not source.is_dir():
            raise PublishError(
                f"Nothing to publish, {source} is not a directory",
                source=source,
                destination=destination,
            )
        if not destination.parent.is_dir():
            raise PublishError(
                f"Destination parent {destination.parent} does not exist",
                source=source,
                destination=destination,
            )
        logger.info("Publishing {} -> {}", source, destination)
        try:
            if destination.exists() and not destination.is_dir():
                logger.warning("Replacing file {} with a directory", destination)
                destination.unlink()
            shutil.copytree(source, destination, dirs_exist_ok=True)
        except OSError as e:
            raise PublishError(
                f"Copying {source} to {destination} failed: {e}",
                source=source,
                destination=destination,
            ) from e
        return destination

    def publish(self) -> list[str]:
        """Copy every local output directory to its external destination."""
        self.report.state = BatchState.PUBLISHING
        try:
            for source, destination in self.config.destinations():
                self.publish_dir(source, destination)
                self.report.published.append(str(destination))
        except BaseException as e:
            self._mark_aborted(e)
            raise
        return self.report.published

    # =========================================================================
    # Whole pipeline
    # =========================================================================

    def run(self, convert: bool = True, publish: bool = True) -> BatchReport:
        """Run the pipeline top to bottom.

        Parameters
        ----------
        convert : bool, optional
            Convert the notebooks, by default True.
        publish : bool, optional
            Copy outputs to the destinations, by default True.

        Returns
        -------
        BatchReport
            The report, in state DONE.

        Raises
        ------
        ConversionError
            If a converter fails.
        PublishError
            If a copy fails.
        FileNotFoundError
            If the notebook source directory is missing.
        """
        self.runner.reset()
        self.report = BatchReport(started=_now())
        try:
            self.ensure_output_dirs()
            if convert:
                self.convert_all(self.discover())
            if publish:
                self.publish()
        except BaseException as e:
            if self.report.state != BatchState.ABORTED:
                self._mark_aborted(e)
            raise
        self.report.state = BatchState.DONE
        self.report.finished = _now()
        logger.info("Run finished")
        return self.report
