"""Helpers shared by the locus reconstruction stages.

Column naming, sequence slicing and the assembly of per-locus column blocks
into a haplotype table with its locus -> column range map.
"""

import pandas as pd

from fsc_reader.exceptions import InconsistentInputError
from fsc_reader.models import HaplotypeData, MarkerKind

ID_COLUMNS = ["id", "deme"]


def zero_pad(values: list[int]) -> list[str]:
    """Pad integers with leading zeros to the width of the largest.

    Example:
        >>> zero_pad([1, 2, 10])
        ['01', '02', '10']
    """
    width = len(str(max(values)))
    return [str(v).zfill(width) for v in values]


def locus_column_names(name: str, n_cols: int) -> list[str]:
    """Column names for a locus.

    A locus yielding a single column keeps its name; otherwise each site
    gets a zero-padded suffix.

    Example:
        >>> locus_column_names("C1B1_SNP", 3)
        ['C1B1_SNP_L1', 'C1B1_SNP_L2', 'C1B1_SNP_L3']
    """
    if n_cols == 1:
        return [name]
    return [f"{name}_L{i}" for i in zero_pad(list(range(1, n_cols + 1)))]


def slice_sequences(seqs: pd.Series, start: int, stop: int | None) -> pd.Series:
    """Slice every sequence in a column (0-based, half-open)."""
    return seqs.str.slice(start, stop)


def explode_sequences(seqs: pd.Series) -> pd.DataFrame:
    """Split each sequence into one column per character.

    Raises:
        InconsistentInputError: If sequences differ in length
    """
    lengths = seqs.str.len()
    if lengths.nunique() > 1:
        raise InconsistentInputError(
            f"Sequences in column '{seqs.name}' differ in length: "
            f"{sorted(lengths.unique().tolist())}"
        )
    return pd.DataFrame(seqs.map(list).tolist(), index=seqs.index)


def assemble_haplotypes(
    id_cols: pd.DataFrame,
    blocks: list[tuple[str, MarkerKind, pd.DataFrame]],
) -> tuple[pd.DataFrame, dict[str, range], dict[str, MarkerKind]]:
    """Join per-locus column blocks into one table.

    Args:
        id_cols: id and deme columns
        blocks: (locus name, marker kind, columns) in output order; the
            columns are renamed after the locus

    Returns:
        Table, locus name -> half-open column range, locus name -> kind
    """
    locus_cols: dict[str, range] = {}
    locus_types: dict[str, MarkerKind] = {}
    frames = [id_cols.reset_index(drop=True)]
    last_col = len(ID_COLUMNS)
    for name, kind, cols in blocks:
        cols = cols.reset_index(drop=True)
        cols.columns = locus_column_names(name, cols.shape[1])
        frames.append(cols)
        locus_cols[name] = range(last_col, last_col + cols.shape[1])
        locus_types[name] = kind
        last_col += cols.shape[1]

    table = pd.concat(frames, axis=1)
    return table, locus_cols, locus_types


def haplotype_data(
    id_cols: pd.DataFrame,
    blocks: list[tuple[str, MarkerKind, pd.DataFrame]],
    **kwargs,
) -> HaplotypeData:
    """Assemble blocks into a HaplotypeData (extra fields passed through)."""
    table, locus_cols, locus_types = assemble_haplotypes(id_cols, blocks)
    return HaplotypeData(
        table=table, locus_cols=locus_cols, locus_types=locus_types, **kwargs
    )
