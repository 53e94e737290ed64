# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from pathlib import Path
from typing import Optional
import logging

import typer

from ..adapters.filesystem.local_fs import LocalFS
from ..adapters.hashing.sha256_hasher import SHA256Hasher
from ..domain import (
    ConfigurationError,
    GeneratorConfig,
    Operation,
    OperationWeights,
    PipelineConfig,
    RunStats,
    parse_duration,
)
from ..services import ContentStore, GeneratorService, PipelineService, format_bytes

from ..logging_config import setup_logging

setup_logging()

app = typer.Typer(help="fshelpers CLI - filesystem exercise tools over a content-addressable store")

logger = logging.getLogger(__name__)


# ------------------------------
# Wiring helpers
# ------------------------------


def _set_verbose(verbose: bool) -> None:
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")


def _duration(text: str) -> float:
    try:
        return parse_duration(text)
    except ConfigurationError as e:
        raise typer.BadParameter(f"failed to parse duration: {e}", param_hint="DURATION")


def _weights(text: Optional[str]) -> OperationWeights:
    try:
        return OperationWeights.parse(text)
    except ConfigurationError as e:
        raise typer.BadParameter(str(e), param_hint="--weights")


def _wire(root: Path) -> tuple[LocalFS, ContentStore]:
    """
    Minimal composition root:
      LocalFS + SHA256Hasher + ContentStore
    """
    return LocalFS(), ContentStore(root, SHA256Hasher())


def _run_pipeline(cfg: PipelineConfig, label: str) -> RunStats:
    fs, store = _wire(Path(cfg.root))
    return PipelineService(fs, store, cfg).run(label=label)


# ------------------------------
# CLI Commands
# ------------------------------


def _root_arg():
    return typer.Argument(
        ...,
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        help="Store root directory",
    )


@app.command()
def readall(
    root: Path = _root_arg(),
    readers: int = typer.Option(1, "-n", "--readers", min=1, help="Number of concurrent readers"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """
    Read every file under ROOT once and verify its content hash against its name.
    """
    _set_verbose(verbose)
    cfg = PipelineConfig(
        root=str(root),
        workers=readers,
        weights=OperationWeights.only(Operation.VERIFY_READ),
        admit_probability=1.0,
        max_replicas=1,
        report_every=100,
        count_bytes=True,
    )
    stats = _run_pipeline(cfg, label="read")
    typer.echo(
        f"Verified {stats.count(Operation.VERIFY_READ)} files under {root}; "
        f"bad hashes: {stats.integrity_failures}"
    )


@app.command()
def readrandom(
    root: Path = _root_arg(),
    duration: str = typer.Argument(..., help="How long to run, e.g. 90s, 10m, 1h30m"),
    readers: int = typer.Option(1, "-n", "--readers", min=1, help="Number of concurrent readers"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible runs"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """
    Read random ranges of a random sample of files under ROOT for DURATION.
    """
    _set_verbose(verbose)
    cfg = PipelineConfig(
        root=str(root),
        workers=readers,
        duration=_duration(duration),
        weights=OperationWeights.only(Operation.RANGE_READ),
        seed=seed,
    )
    stats = _run_pipeline(cfg, label="read from")
    typer.echo(f"Read ranges from {stats.dispatched} sampled files under {root}")


@app.command()
def readwrite(
    root: Path = _root_arg(),
    duration: str = typer.Argument(..., help="How long to run, e.g. 90s, 10m, 1h30m"),
    workers: int = typer.Option(1, "-n", "--workers", min=1, help="Number of concurrent workers"),
    weights: Optional[str] = typer.Option(
        None,
        "--weights",
        help="Operation weights, e.g. verify=1,range=1,rangewrite=1,write=1",
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible runs"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """
    Apply a weighted mix of verify, range-read, range-rewrite and write-new
    operations to a random sample of files under ROOT for DURATION.
    """
    _set_verbose(verbose)
    cfg = PipelineConfig(
        root=str(root),
        workers=workers,
        duration=_duration(duration),
        weights=_weights(weights),
        seed=seed,
    )
    stats = _run_pipeline(cfg, label="handled")
    typer.echo(
        f"Handled {stats.dispatched} sampled files under {root}; "
        f"bad hashes: {stats.integrity_failures}; "
        f"written: {stats.files_written} ({format_bytes(stats.bytes_written)})"
    )


@app.command()
def mktestfiles(
    root: Path = _root_arg(),
    percent: int = typer.Argument(
        ..., min=0, max=100, help="Percentage of the free space to fill"
    ),
    writers: int = typer.Option(1, "-n", "--writers", min=1, help="Number of concurrent writers"),
    min_size: int = typer.Option(1_000_000, "--min-size", help="Smallest file size in bytes"),
    max_size: int = typer.Option(30_000_000, "--max-size", help="Largest file size in bytes"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible runs"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """
    Fill ROOT with random files named by their SHA-256 digest.
    """
    _set_verbose(verbose)
    try:
        cfg = GeneratorConfig(
            root=str(root),
            writers=writers,
            percent=percent,
            min_size=min_size,
            max_size=max_size,
            seed=seed,
        )
    except ConfigurationError as e:
        raise typer.BadParameter(str(e))

    fs, store = _wire(root)
    try:
        stats = GeneratorService(fs, store, cfg).run()
    except OSError as e:
        typer.echo(f"Error: failed to prepare '{root}': {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(
        f"Wrote {stats.files_written} files ({format_bytes(stats.bytes_written)}) to {root}"
    )
