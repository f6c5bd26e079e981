"""Locus selection by chromosome and marker type.

Selection is done on the locus table first, so a request that matches no
loci can be rejected before the .arp file is read, and then applied to a
haplotype table through its locus -> column range map.
"""

from collections.abc import Iterable

import pandas as pd

from fsc_reader.exceptions import LocusNotFoundError, UnsupportedRequestError
from fsc_reader.models import HaplotypeData, MarkerKind
from fsc_reader.utils import ID_COLUMNS

ALL_MARKERS = "ALL"


def normalize_markers(marker: str | Iterable[str]) -> set[MarkerKind] | None:
    """Parse requested marker types.

    Args:
        marker: One or more of "dna", "snp", "microsat", "standard", "all"
            (case-insensitive)

    Returns:
        Set of marker kinds, or None if all types were requested

    Raises:
        UnsupportedRequestError: If a value isn't a known marker type
    """
    markers = [marker] if isinstance(marker, str) else list(marker)
    if not markers:
        raise UnsupportedRequestError("No marker type requested")
    if any(str(m).strip().upper() == ALL_MARKERS for m in markers):
        for m in markers:
            if str(m).strip().upper() != ALL_MARKERS:
                MarkerKind.parse(m)
        return None
    return {MarkerKind.parse(m) for m in markers}


def select_loci(
    locus_info: pd.DataFrame,
    marker: str | Iterable[str] = "all",
    chrom: Iterable[int] | None = None,
) -> pd.DataFrame:
    """Restrict the locus table to chromosomes and marker types.

    Args:
        locus_info: Validated locus table
        marker: Marker types to keep (see normalize_markers)
        chrom: Chromosomes to keep, or None for all

    Returns:
        Rows of locus_info that survive both filters, in declared order

    Raises:
        LocusNotFoundError: If a requested chromosome is beyond the last
            declared one, or no loci remain
        UnsupportedRequestError: If a marker type is unknown
    """
    kinds = normalize_markers(marker)
    selected = locus_info

    if chrom is not None:
        chrom = sorted({int(c) for c in chrom})
        max_chrom = int(locus_info["chromosome"].max())
        if not chrom or chrom[-1] > max_chrom:
            raise LocusNotFoundError(
                f"There are not {chrom[-1] if chrom else 0} chromosomes available "
                f"(last declared chromosome is {max_chrom})"
            )
        selected = selected[selected["chromosome"].isin(chrom)]

    if kinds is not None:
        selected = selected[selected["actual_type"].isin([k.value for k in kinds])]

    if selected.empty:
        requested = "all" if kinds is None else sorted(k.value for k in kinds)
        raise LocusNotFoundError(
            f"No loci available for marker types {requested} "
            f"on chromosomes {chrom if chrom is not None else 'all'}."
        )
    return selected


def subset_haplotypes(hap: HaplotypeData, selected: pd.DataFrame) -> HaplotypeData:
    """Project a haplotype table onto selected loci.

    Loci of the selection without columns in the table (blocks with no
    polymorphic sites) are skipped. Column order is preserved and the
    locus column ranges are rebuilt for the projected table.

    Args:
        hap: Haplotype data to filter
        selected: Output of select_loci()

    Returns:
        New HaplotypeData; polymorphic positions are filtered to the
        surviving loci
    """
    keep = set(selected["name"])
    col_idx = list(range(len(ID_COLUMNS)))
    locus_cols: dict[str, range] = {}
    for name, cols in hap.locus_cols.items():
        if name not in keep:
            continue
        locus_cols[name] = range(len(col_idx), len(col_idx) + len(cols))
        col_idx.extend(cols)

    poly_pos = hap.poly_pos
    if poly_pos is not None:
        poly_pos = poly_pos[poly_pos["name"].isin(locus_cols)].reset_index(drop=True)

    return HaplotypeData(
        table=hap.table.iloc[:, col_idx].copy(),
        locus_cols=locus_cols,
        locus_types={name: hap.locus_types[name] for name in locus_cols},
        poly_pos=poly_pos,
        file=hap.file,
    )


def select_haplotypes(
    hap: HaplotypeData,
    locus_info: pd.DataFrame,
    marker: str | Iterable[str] = "all",
    chrom: Iterable[int] | None = None,
) -> HaplotypeData:
    """Select loci from a haplotype table by chromosome and marker type."""
    return subset_haplotypes(hap, select_loci(locus_info, marker, chrom))


def drop_monomorphic(hap: HaplotypeData) -> HaplotypeData:
    """Drop data columns holding a single allele across all haplotypes.

    Loci left without columns are removed from the locus map.
    """
    col_idx = list(range(len(ID_COLUMNS)))
    locus_cols: dict[str, range] = {}
    for name, cols in hap.locus_cols.items():
        poly = [i for i in cols if hap.table.iloc[:, i].nunique() > 1]
        if poly:
            locus_cols[name] = range(len(col_idx), len(col_idx) + len(poly))
            col_idx.extend(poly)

    return HaplotypeData(
        table=hap.table.iloc[:, col_idx].copy(),
        locus_cols=locus_cols,
        locus_types={name: hap.locus_types[name] for name in locus_cols},
        poly_pos=hap.poly_pos,
        file=hap.file,
    )
