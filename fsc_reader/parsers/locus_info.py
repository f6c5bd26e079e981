"""Locus metadata table.

The locus table describes how the columns of an .arp sample matrix map onto
the blocks declared in the simulation parameter file. It is produced when
the parameter file is written and is read-only for every .arp read.

Columns (one row per block, in declared order):
    name             block name, e.g. C1B2_SNP
    chromosome       chromosome number, from 1
    fsc_type         marker type written to fastsimcoal2
    actual_type      marker type the block represents
    mat_col_start    first raw matrix column (1-based, inclusive, id=1 deme=2)
    mat_col_end      last raw matrix column (1-based, inclusive)
    chrom_pos_start  position of the first site of the block on its chromosome
    dna_start        first character within a DNA token (optional)
    dna_end          last character within a DNA token (optional)
"""

from collections.abc import Iterable
from dataclasses import asdict
from pathlib import Path

import numpy as np
import pandas as pd

from fsc_reader.exceptions import InconsistentInputError, UnsupportedRequestError
from fsc_reader.models import LocusInfo, MarkerKind

LOCUS_INFO_COLUMNS = [
    "name",
    "chromosome",
    "fsc_type",
    "actual_type",
    "mat_col_start",
    "mat_col_end",
    "chrom_pos_start",
    "dna_start",
    "dna_end",
]

REQUIRED_COLUMNS = LOCUS_INFO_COLUMNS[:7]

_INT_COLUMNS = ["chromosome", "mat_col_start", "mat_col_end", "chrom_pos_start"]


def locus_table(loci: Iterable[LocusInfo]) -> pd.DataFrame:
    """Build a validated locus table from LocusInfo records.

    Example:
        >>> info = locus_table([
        ...     LocusInfo("C1B1_DNA", 1, MarkerKind.DNA, MarkerKind.DNA, 3, 3, 0),
        ... ])
    """
    records = [asdict(locus) for locus in loci]
    return validate_locus_info(pd.DataFrame(records, columns=LOCUS_INFO_COLUMNS))


def load_locus_info(filepath: Path) -> pd.DataFrame:
    """Load a locus table from a CSV or tab-separated file.

    Column names written by the R tooling (mat.col.start, ...) are accepted.

    Args:
        filepath: Path to .csv, .tsv or .tab file

    Returns:
        Validated locus table

    Raises:
        FileNotFoundError: If file doesn't exist
        InconsistentInputError: If the table is invalid
    """
    if not filepath.exists():
        raise FileNotFoundError(f"Locus info file not found: {filepath}")

    sep = "\t" if filepath.suffix.lower() in {".tsv", ".tab"} else ","
    df = pd.read_csv(filepath, sep=sep)
    df.columns = [c.strip().replace(".", "_") for c in df.columns]
    return validate_locus_info(df)


def _check_positions_increasing(df: pd.DataFrame) -> None:
    for chrom, starts in df.groupby("chromosome", sort=False)["chrom_pos_start"]:
        if not np.all(np.diff(starts.to_numpy()) > 0):
            raise InconsistentInputError(
                f"chrom_pos_start must be strictly increasing within chromosome "
                f"{chrom} in declared order: {starts.tolist()}"
            )


def validate_locus_info(df: pd.DataFrame) -> pd.DataFrame:
    """Check and normalize a locus table.

    Args:
        df: Candidate locus table

    Returns:
        New DataFrame with LOCUS_INFO_COLUMNS, integer coordinates, upper-case
        marker types and nullable integer DNA offsets

    Raises:
        InconsistentInputError: If columns are missing, values are invalid,
            or block positions overlap within a chromosome
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise InconsistentInputError(f"Locus info is missing columns: {missing}")
    if df.empty:
        raise InconsistentInputError("Locus info has no loci")

    out = df.reindex(columns=LOCUS_INFO_COLUMNS).reset_index(drop=True)
    out["name"] = out["name"].astype(str)

    duplicated = out["name"][out["name"].duplicated()].tolist()
    if duplicated:
        raise InconsistentInputError(f"Duplicated locus names: {duplicated}")

    try:
        for col in ("fsc_type", "actual_type"):
            out[col] = [MarkerKind.parse(v).value for v in out[col]]
    except UnsupportedRequestError as e:
        raise InconsistentInputError(f"Invalid locus marker type: {e}") from e

    try:
        out[_INT_COLUMNS] = out[_INT_COLUMNS].astype("int64")
        for col in ("dna_start", "dna_end"):
            out[col] = pd.to_numeric(out[col]).astype("Int64")
    except (TypeError, ValueError) as e:
        raise InconsistentInputError(f"Invalid locus coordinates: {e}") from e

    if (out["chromosome"] < 1).any():
        raise InconsistentInputError("Chromosomes are numbered from 1")

    bad_cols = out[(out["mat_col_start"] < 3) | (out["mat_col_end"] < out["mat_col_start"])]
    if not bad_cols.empty:
        raise InconsistentInputError(
            f"Invalid raw column range for loci: {bad_cols['name'].tolist()}"
        )

    has_start, has_end = out["dna_start"].notna(), out["dna_end"].notna()
    dna_start, dna_end = out["dna_start"].fillna(1), out["dna_end"].fillna(1)
    bad_dna = (
        (has_start != has_end) | (dna_start < 1) | (dna_end < dna_start)
    ).to_numpy(dtype=bool)
    if bad_dna.any():
        raise InconsistentInputError(
            f"Invalid DNA character range for loci: {out.loc[bad_dna, 'name'].tolist()}"
        )

    _check_positions_increasing(out)
    return out
