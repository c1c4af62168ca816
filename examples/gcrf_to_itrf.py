# /// script
# requires-python = ">=3.10"
# dependencies = ["typer>=0.9.0", "eopframes"]
#
# [tool.uv.sources]
# eopframes = { path = ".." }
# ///
"""Print the GCRF to ITRF rotation for one or more epochs.

Earth orientation data comes from, in order of preference: the file given
with ``--eop-file``, the cached IERS ``finals.all.iau2000.txt`` (downloaded
when stale) with ``--download``, or none (rotation without EOP corrections).

Usage:
    uv run examples/gcrf_to_itrf.py EPOCH [OPTIONS]

Examples:
    # SOFA Example 5.5 epoch, no EOP
    uv run examples/gcrf_to_itrf.py 2007-04-05T12:00:00Z

    # With an EOP 14 C04 file, hourly for a day
    uv run examples/gcrf_to_itrf.py 2007-04-05 --eop-file eopc04.txt --eop-format c04 \\
        --step 3600 --count 24

    # Latest IERS bulletin
    uv run examples/gcrf_to_itrf.py 2024-01-01 --download
"""

import logging
import time
from pathlib import Path
from typing import Annotated

import jax.numpy as jnp
import typer

from eopframes import Epoch
from eopframes.constants import RAD2DEG, TWO_PI
from eopframes.eop import empty_eop, load_cached_eop, load_eop_from_file
from eopframes.frames import FrameContext, ITRFFrame


def main(
    epoch: Annotated[str, typer.Argument(help="ISO 8601 epoch, e.g. 2007-04-05T12:00:00Z")],
    eop_file: Annotated[Path | None, typer.Option(help="IERS EOP file")] = None,
    eop_format: Annotated[str, typer.Option(help="EOP file format: standard or c04")] = "standard",
    download: Annotated[bool, typer.Option(help="Use the cached IERS bulletin")] = False,
    step: Annotated[float, typer.Option(help="Seconds between epochs")] = 60.0,
    count: Annotated[int, typer.Option(help="Number of epochs")] = 1,
    verbose: Annotated[bool, typer.Option(help="Show library log messages")] = False,
) -> None:
    """Compute GCRF->ITRF rotations with the CIO-based IERS 2003 model."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    if eop_file is not None:
        eop = load_eop_from_file(eop_file, eop_format)
    elif download:
        eop = load_cached_eop()
    else:
        eop = empty_eop()
    print(f"EOP: {eop!r}")

    frame = ITRFFrame(FrameContext(eop=eop))
    start = Epoch(epoch)

    t0 = time.perf_counter()
    for i in range(count):
        epc = start + i * step
        state = frame.state(epc)
        era_deg = (state.era % TWO_PI) * RAD2DEG
        print(f"\n{epc}  ERA = {era_deg:.9f} deg")
        with jnp.printoptions(precision=15, suppress=False):
            print(state.rotation.to_matrix())
    elapsed = time.perf_counter() - t0

    print(f"\n{count} epoch(s) in {elapsed:.3f}s")


if __name__ == "__main__":
    typer.run(main)
