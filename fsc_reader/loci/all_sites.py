"""Locus reconstruction for full-site output.

When fastsimcoal2 reports genotypes at every site, each block of the locus
table owns a fixed range of raw matrix columns. DNA blocks are held in a
single sequence token, possibly shared with neighbouring DNA blocks, and are
cut out by character offset. SNP blocks simulated as DNA are split into one
column per site.
"""

import logging

import pandas as pd

from fsc_reader.exceptions import InconsistentInputError
from fsc_reader.models import HaplotypeData, MarkerKind, RawSampleData
from fsc_reader.utils import ID_COLUMNS, explode_sequences, haplotype_data, slice_sequences

logger = logging.getLogger(__name__)


def extract_locus_columns(locus: pd.Series, matrix: pd.DataFrame) -> pd.DataFrame:
    """Extract the columns of one block from the raw matrix.

    Args:
        locus: Row of the locus table
        matrix: Raw sample matrix

    Returns:
        Columns of the block (not yet named)

    Raises:
        InconsistentInputError: If the block's columns aren't in the matrix
    """
    start, end = int(locus["mat_col_start"]), int(locus["mat_col_end"])
    if end > matrix.shape[1]:
        raise InconsistentInputError(
            f"Locus '{locus['name']}' spans raw columns {start}-{end} but the "
            f".arp file has {matrix.shape[1]} columns"
        )
    cols = matrix.iloc[:, start - 1:end]

    if locus["fsc_type"] != MarkerKind.DNA:
        return cols

    dna_start, dna_end = locus["dna_start"], locus["dna_end"]
    if pd.isna(dna_start) or pd.isna(dna_end):
        first, stop = 0, None
    else:
        first, stop = int(dna_start) - 1, int(dna_end)

    pieces = []
    for _, seqs in cols.items():
        seqs = slice_sequences(seqs, first, stop)
        if locus["actual_type"] == MarkerKind.SNP:
            pieces.append(explode_sequences(seqs))
        else:
            pieces.append(seqs.to_frame())
    return pd.concat(pieces, axis=1)


def parse_all_sites(locus_info: pd.DataFrame, raw: RawSampleData) -> HaplotypeData:
    """Map the raw matrix onto the declared loci.

    Loci are processed in declared order, so the locus column ranges of the
    result partition its data columns in locus table order.

    Args:
        locus_info: Validated locus table
        raw: Raw sample data without polymorphic position annotation

    Returns:
        HaplotypeData with one block of columns per locus
    """
    blocks = [
        (locus["name"], MarkerKind(locus["actual_type"]),
         extract_locus_columns(locus, raw.matrix))
        for _, locus in locus_info.iterrows()
    ]
    hap = haplotype_data(raw.matrix[ID_COLUMNS], blocks, file=raw.file)
    logger.debug(f"{len(hap.locus_cols)} loci in {len(hap.data_columns)} columns")
    return hap
