"""Locus reconstruction for polymorphic-site-only output.

When fastsimcoal2 only reports variable sites, the raw matrix columns no
longer line up with the locus table. Instead, every polymorphic position is
resolved to the block containing it, and the raw columns are rebuilt from
the order of the positions:

- consecutive positions in DNA blocks are written as one sequence token, so
  they share a raw column and are told apart by their character index;
- every other position gets a raw column of its own.

Processing flow:
1. Resolve each position to its block (chromosome + interval lookup)
2. Assign raw columns and character indices
3. Gather the columns of each block, cutting DNA/SNP sites out of the tokens
"""

import logging

import numpy as np
import pandas as pd

from fsc_reader.exceptions import InconsistentInputError
from fsc_reader.models import HaplotypeData, MarkerKind, RawSampleData
from fsc_reader.utils import ID_COLUMNS, explode_sequences, haplotype_data, slice_sequences

logger = logging.getLogger(__name__)


def locus_site_counts(locus_info: pd.DataFrame) -> np.ndarray:
    """Number of sites spanned by each block.

    Blocks with DNA character offsets span dna_end - dna_start + 1 sites,
    other blocks one site per raw column. A DNA block without offsets owns a
    whole token of unknown length and is unbounded (inf).
    """
    n_sites = (locus_info["mat_col_end"] - locus_info["mat_col_start"] + 1).to_numpy(
        dtype="float64"
    )
    dna_sites = (locus_info["dna_end"] - locus_info["dna_start"] + 1).to_numpy(
        dtype="float64", na_value=np.nan
    )
    has_offsets = ~np.isnan(dna_sites)
    n_sites[has_offsets] = dna_sites[has_offsets]
    whole_token = (locus_info["fsc_type"] == MarkerKind.DNA.value).to_numpy() & ~has_offsets
    n_sites[whole_token] = np.inf
    return n_sites


def resolve_positions(locus_info: pd.DataFrame, poly_pos: pd.DataFrame) -> pd.DataFrame:
    """Find the block owning each polymorphic position.

    A position belongs to the last block on its chromosome starting at or
    before it, and must lie within that block's sites (see
    locus_site_counts). Blocks must be declared in increasing position order
    within a chromosome (checked by validate_locus_info).

    Args:
        locus_info: Validated locus table
        poly_pos: chromosome and position of each polymorphic site

    Returns:
        Copy of poly_pos with locus_row (row of locus_info), name,
        actual_type and fsc_type added

    Raises:
        InconsistentInputError: If a position lies on a chromosome without
            blocks, before the first block of its chromosome, or past the
            end of the block starting below it
    """
    n_sites = locus_site_counts(locus_info)
    locus_row = np.empty(len(poly_pos), dtype="int64")
    for chrom, sites in poly_pos.groupby("chromosome", sort=False):
        chrom_loci = np.flatnonzero(locus_info["chromosome"].to_numpy() == chrom)
        if len(chrom_loci) == 0:
            raise InconsistentInputError(
                f"Polymorphic positions reported on chromosome {chrom}, "
                f"which has no loci"
            )
        positions = sites["position"].to_numpy()
        starts = locus_info["chrom_pos_start"].to_numpy()[chrom_loci]
        idx = np.searchsorted(starts, positions, side="right") - 1
        if (idx < 0).any():
            orphans = positions[idx < 0].tolist()
            raise InconsistentInputError(
                f"Polymorphic positions {orphans} on chromosome {chrom} precede "
                f"the first locus (starting at {starts[0]})"
            )
        owner = chrom_loci[idx]
        outside = positions >= locus_info["chrom_pos_start"].to_numpy()[owner] + n_sites[owner]
        if outside.any():
            names = locus_info["name"].to_numpy()[owner[outside]].tolist()
            raise InconsistentInputError(
                f"Polymorphic positions {positions[outside].tolist()} on chromosome "
                f"{chrom} lie past the end of loci {names}"
            )
        locus_row[poly_pos.index.get_indexer(sites.index)] = owner

    resolved = poly_pos.reset_index(drop=True).copy()
    resolved["locus_row"] = locus_row
    for col in ("name", "actual_type", "fsc_type"):
        resolved[col] = locus_info[col].to_numpy()[locus_row]
    return resolved


def assign_raw_columns(resolved: pd.DataFrame) -> pd.DataFrame:
    """Work out which raw matrix column holds each polymorphic site.

    A new column starts at every site, except a DNA site directly following
    another DNA site, which continues the same sequence token.

    Args:
        resolved: Output of resolve_positions()

    Returns:
        Copy with mat_col (0-based column of the raw matrix, after id and
        deme) and dna_pos (0-based character index within the token, DNA
        sites only)
    """
    out = resolved.copy()
    is_dna = out["fsc_type"] == MarkerKind.DNA.value
    continues_token = is_dna & is_dna.shift(1, fill_value=False)
    out["mat_col"] = (~continues_token).cumsum() + len(ID_COLUMNS) - 1
    out["dna_pos"] = out.groupby("mat_col").cumcount().astype("Int64").where(is_dna)
    return out


def extract_poly_locus(sites: pd.DataFrame, matrix: pd.DataFrame) -> pd.DataFrame:
    """Extract the columns of one block from the raw matrix.

    Args:
        sites: Rows of assign_raw_columns() output belonging to the block
        matrix: Raw sample matrix

    Returns:
        Columns of the block (not yet named)
    """
    mat_cols = sorted(sites["mat_col"].unique())
    cols = matrix.iloc[:, mat_cols]

    first = sites.iloc[0]
    if first["fsc_type"] != MarkerKind.DNA or first["actual_type"] not in (
        MarkerKind.DNA,
        MarkerKind.SNP,
    ):
        return cols

    # A single slice covers every site of the block within its token
    start, stop = int(sites["dna_pos"].iloc[0]), int(sites["dna_pos"].iloc[-1]) + 1
    pieces = []
    for _, seqs in cols.items():
        seqs = slice_sequences(seqs, start, stop)
        if first["actual_type"] == MarkerKind.SNP:
            pieces.append(explode_sequences(seqs))
        else:
            pieces.append(seqs.to_frame())
    return pd.concat(pieces, axis=1)


def parse_poly_sites(locus_info: pd.DataFrame, raw: RawSampleData) -> HaplotypeData:
    """Map a polymorphic-site-only raw matrix onto the declared loci.

    Only blocks holding at least one polymorphic site appear in the result,
    in locus table order.

    Args:
        locus_info: Validated locus table
        raw: Raw sample data with polymorphic position annotation

    Returns:
        HaplotypeData whose poly_pos holds the annotated positions

    Raises:
        InconsistentInputError: If positions can't be resolved, or the raw
            matrix has fewer columns than the positions require
    """
    assert raw.poly_pos is not None
    sites = assign_raw_columns(resolve_positions(locus_info, raw.poly_pos))

    n_cols = sites["mat_col"].max() + 1
    if n_cols > raw.matrix.shape[1]:
        raise InconsistentInputError(
            f"{len(sites)} polymorphic positions need {n_cols - 2} data columns "
            f"but the .arp file has {raw.matrix.shape[1] - 2}"
        )

    blocks = []
    for _, locus_sites in sites.groupby("locus_row", sort=True):
        name = locus_sites["name"].iloc[0]
        kind = MarkerKind(locus_sites["actual_type"].iloc[0])
        blocks.append((name, kind, extract_poly_locus(locus_sites, raw.matrix)))

    hap = haplotype_data(raw.matrix[ID_COLUMNS], blocks, poly_pos=sites, file=raw.file)
    logger.debug(
        f"{len(sites)} polymorphic positions resolved to {len(hap.locus_cols)} loci"
    )
    return hap
