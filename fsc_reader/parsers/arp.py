"""Arlequin (.arp) file parser.

Pulls the sample data blocks and the polymorphic site annotation out of the
Arlequin files written by fastsimcoal2. Supports gzipped files.

Relevant parts of an .arp file (after trimming and dropping blank lines):

    #3 polymorphic positions on chromosome 1
    #12, 57, 301
    ...
    SampleName="Sample 1"
    SampleSize=4
    SampleData= {
    1_1    1    ACG 12
    1_2    1    ACA 14
    }

Each sample data line is <id> <frequency> <token1> <token2> ...; the
frequency is always 1 for simulated haplotypes and is dropped.
"""

import logging
import re
from pathlib import Path

import pandas as pd

from fsc_reader.exceptions import InconsistentInputError
from fsc_reader.io_utils import read_clean_lines
from fsc_reader.models import RawSampleData

logger = logging.getLogger(__name__)

POLY_SUMMARY_TAG = "polymorphic positions on"
SAMPLE_DATA_TAG = "SampleData="
BLOCK_END = "}"

_INT_RE = re.compile(r"\d+")


def parse_poly_positions(lines: list[str]) -> pd.DataFrame | None:
    """Parse the polymorphic site annotation.

    Chromosomes are numbered by the order of their summary lines. Only
    chromosomes reporting at least one polymorphic position contribute
    records; their positions are on the line following the summary.

    Args:
        lines: Cleaned lines of an .arp file

    Returns:
        DataFrame with chromosome and position columns, in file order, or
        None if the file has no summary lines (genotypes at every site)

    Raises:
        InconsistentInputError: If a summary line has no count, or its
            position list is missing
    """
    summary_idx = [i for i, line in enumerate(lines) if POLY_SUMMARY_TAG in line]
    if not summary_idx:
        return None

    chromosomes: list[int] = []
    positions: list[int] = []
    for chrom, i in enumerate(summary_idx, 1):
        match = _INT_RE.search(lines[i])
        if match is None:
            raise InconsistentInputError(
                f"No polymorphic position count in line: '{lines[i]}'"
            )
        if int(match.group()) == 0:
            continue
        if i + 1 >= len(lines):
            raise InconsistentInputError(
                f"Missing polymorphic position list for chromosome {chrom}"
            )
        chrom_positions = [int(p) for p in _INT_RE.findall(lines[i + 1])]
        chromosomes.extend([chrom] * len(chrom_positions))
        positions.extend(chrom_positions)

    return pd.DataFrame(
        {"chromosome": chromosomes, "position": positions},
        dtype="int64",
    )


def find_sample_blocks(lines: list[str]) -> list[tuple[int, int]]:
    """Locate sample data blocks.

    Args:
        lines: Cleaned lines of an .arp file

    Returns:
        (first, stop) line index pairs, half-open, of the data lines of each
        block in file order. Empty blocks give first == stop.

    Raises:
        InconsistentInputError: If a block is never closed
    """
    ends = [i for i, line in enumerate(lines) if line == BLOCK_END]
    blocks: list[tuple[int, int]] = []
    for start in (i for i, line in enumerate(lines) if SAMPLE_DATA_TAG in line):
        stop = next((e for e in ends if e > start), None)
        if stop is None:
            raise InconsistentInputError(
                f"Sample data block starting at line {start + 1} is not closed"
            )
        blocks.append((start + 1, stop))
    return blocks


def parse_sample_blocks(lines: list[str]) -> pd.DataFrame | None:
    """Build the raw sample matrix from all sample data blocks.

    Args:
        lines: Cleaned lines of an .arp file

    Returns:
        DataFrame with id, deme (block number, from 1) and col3..colN, one
        row per haplotype in file order; None if no block holds data

    Raises:
        InconsistentInputError: If rows don't all have the same number of
            tokens
    """
    rows: list[list[str]] = []
    for deme, (first, stop) in enumerate(find_sample_blocks(lines), 1):
        for line_num in range(first, stop):
            parts = lines[line_num].split()
            if len(parts) < 3:
                raise InconsistentInputError(
                    f"Invalid sample line {line_num + 1}: expected id, frequency "
                    f"and data, got {len(parts)} fields"
                )
            rows.append([parts[0], str(deme), *parts[2:]])

    if not rows:
        return None

    width = len(rows[0])
    ragged = next((r for r in rows if len(r) != width), None)
    if ragged is not None:
        raise InconsistentInputError(
            f"Sample '{ragged[0]}' has {len(ragged) - 2} data tokens, "
            f"expected {width - 2}"
        )

    columns = ["id", "deme"] + [f"col{i}" for i in range(3, width + 1)]
    return pd.DataFrame(rows, columns=columns, dtype=str)


def parse_arp_file(filepath: Path) -> RawSampleData | None:
    """Read an .arp file into a raw sample matrix.

    Args:
        filepath: Path to the .arp file (may be gzipped)

    Returns:
        RawSampleData, or None if the file reports no polymorphic sites on
        any chromosome or holds no sample data

    Raises:
        FileNotFoundError: If file doesn't exist
        InconsistentInputError: If the file is malformed

    Example:
        >>> raw = parse_arp_file(Path("run/run_1_1.arp"))
        >>> raw.matrix.head()
    """
    if not filepath.exists():
        raise FileNotFoundError(f"Can't find .arp file, '{filepath}'.")

    logger.debug(f"reading {filepath}")
    lines = read_clean_lines(filepath)

    poly_pos = parse_poly_positions(lines)
    if poly_pos is not None and poly_pos.empty:
        logger.warning(f"No polymorphic sites found in {filepath}. None returned.")
        return None

    matrix = parse_sample_blocks(lines)
    if matrix is None:
        logger.warning(f"No sample data found in {filepath}. None returned.")
        return None

    logger.debug(
        f"{len(matrix)} haplotypes, {matrix.shape[1] - 2} data columns, "
        f"{0 if poly_pos is None else len(poly_pos)} polymorphic positions"
    )
    return RawSampleData(matrix=matrix, poly_pos=poly_pos, file=filepath)
