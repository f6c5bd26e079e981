"""Genotype formatting.

Combines consecutive haplotypes into individuals. fastsimcoal2 writes the
haplotypes of an individual on adjacent lines within a deme block, so with
ploidy p, rows 0..p-1 form the first individual, rows p..2p-1 the second,
and so on.

Three encodings are supported:
- separate columns: one column per allele copy, "<column>.<copy>"
- one column: allele copies joined by a separator, "A/T"
- coded SNPs: diploid SNPs as the number of non-major alleles (0, 1, 2)
"""

import logging
import re

import numpy as np
import pandas as pd

from fsc_reader.exceptions import InconsistentInputError, UnsupportedRequestError
from fsc_reader.models import HaplotypeData, MarkerKind
from fsc_reader.utils import ID_COLUMNS

logger = logging.getLogger(__name__)

CHROM_PREFIX_RE = re.compile(r"^C(\d+)")


def individual_index(n_rows: int, ploidy: int) -> np.ndarray:
    """Individual number of each haplotype row.

    Raises:
        UnsupportedRequestError: If ploidy is less than 1
        InconsistentInputError: If n_rows isn't a multiple of ploidy
    """
    if ploidy < 1:
        raise UnsupportedRequestError(f"ploidy must be at least 1: {ploidy}")
    if n_rows % ploidy != 0:
        raise InconsistentInputError(
            f"{n_rows} haplotypes can't be combined into individuals of ploidy {ploidy}"
        )
    return np.repeat(np.arange(n_rows // ploidy), ploidy)


def check_coded_snps(locus_types: dict[str, MarkerKind], ploidy: int) -> None:
    """Reject coded SNP output for non-SNP loci or non-diploid data.

    Raises:
        UnsupportedRequestError: If SNPs can't be coded
    """
    non_snp = [name for name, kind in locus_types.items() if kind != MarkerKind.SNP]
    if non_snp:
        raise UnsupportedRequestError(
            f'Select `marker = "snp"` to return coded SNPs (non-SNP loci: {non_snp})'
        )
    if ploidy != 2:
        raise UnsupportedRequestError("Can't code SNPs in non-diploid data.")


def majority_allele(alleles: pd.Series) -> str:
    """Most frequent allele; ties go to the alphabetically first allele."""
    counts = alleles.value_counts()
    return min(counts.index[counts == counts.max()])


def _separate_columns(data: pd.DataFrame, ploidy: int) -> pd.DataFrame:
    n_ind, n_cols = len(data) // ploidy, data.shape[1]
    values = (
        data.to_numpy(dtype=object)
        .reshape(n_ind, ploidy, n_cols)
        .transpose(0, 2, 1)
        .reshape(n_ind, n_cols * ploidy)
    )
    columns = [f"{col}.{copy}" for col in data.columns for copy in range(1, ploidy + 1)]
    return pd.DataFrame(values, columns=columns)


def _one_column(data: pd.DataFrame, gen_id: np.ndarray, sep: str) -> pd.DataFrame:
    return data.groupby(gen_id).agg(sep.join).reset_index(drop=True)


def _coded_snps(data: pd.DataFrame, gen_id: np.ndarray) -> pd.DataFrame:
    coded = {}
    for col, alleles in data.items():
        minor = alleles != majority_allele(alleles)
        coded[col] = minor.groupby(gen_id).sum().astype("int64").to_numpy()
    return pd.DataFrame(coded, columns=data.columns)


def format_genotypes(
    hap: HaplotypeData,
    ploidy: int,
    one_col: bool = False,
    sep: str = "/",
    coded_snps: bool = False,
    sep_chrom: bool = False,
) -> pd.DataFrame | dict[str, pd.DataFrame]:
    """Combine haplotypes into individual genotypes.

    Args:
        hap: Haploid data
        ploidy: Haplotypes per individual
        one_col: One column per locus column, copies joined by sep
        sep: Separator for joined ids and one-column genotypes
        coded_snps: Code diploid SNPs as 0 (major homozygote), 1
            (heterozygote) or 2 (minor homozygote)
        sep_chrom: Return one table per chromosome (see split_by_chromosome)

    Returns:
        Table with id (haplotype ids joined by sep), deme (of the first
        haplotype) and genotype columns; or a dict of such tables

    Raises:
        UnsupportedRequestError: If coded SNPs can't be produced, or both
            one_col and coded_snps are requested
        InconsistentInputError: If the number of haplotypes isn't a multiple
            of ploidy
    """
    if one_col and coded_snps:
        raise UnsupportedRequestError("one_col and coded_snps are mutually exclusive")
    if coded_snps:
        check_coded_snps(hap.locus_types, ploidy)

    table = hap.table.reset_index(drop=True)
    gen_id = individual_index(len(table), ploidy)
    data = table.iloc[:, len(ID_COLUMNS):]

    grouped = table.groupby(gen_id)
    id_cols = pd.DataFrame({
        "id": grouped["id"].agg(sep.join).to_numpy(),
        "deme": grouped["deme"].first().to_numpy(),
    })

    if coded_snps:
        genotypes = _coded_snps(data, gen_id)
    elif one_col:
        genotypes = _one_column(data, gen_id, sep)
    else:
        genotypes = _separate_columns(data, ploidy)

    gen_df = pd.concat([id_cols, genotypes], axis=1)
    logger.debug(f"{len(gen_df)} individuals from {len(table)} haplotypes")

    if sep_chrom:
        return split_by_chromosome(gen_df)
    return gen_df


def split_by_chromosome(df: pd.DataFrame) -> dict[str, pd.DataFrame]:
    """Split a table into one table per chromosome.

    The chromosome of a column is read from the "C<number>" prefix of its
    name (block names such as "C2B1_SNP" carry it). Every table keeps the
    id and deme columns.

    Returns:
        Tables keyed by prefix ("C1", "C2", ...) in column order

    Raises:
        UnsupportedRequestError: If no column name carries a chromosome
            prefix
    """
    by_chrom: dict[str, list[str]] = {}
    for col in df.columns[len(ID_COLUMNS):]:
        match = CHROM_PREFIX_RE.match(col)
        if match:
            by_chrom.setdefault(f"C{match.group(1)}", []).append(col)

    if not by_chrom:
        raise UnsupportedRequestError(
            "Can't split by chromosome: no column name starts with 'C<number>'"
        )
    return {chrom: df[ID_COLUMNS + cols].copy() for chrom, cols in by_chrom.items()}


def resolve_deme_names(df: pd.DataFrame, deme_names: list[str] | None) -> pd.DataFrame:
    """Replace deme numbers (from 1) with deme names.

    Raises:
        InconsistentInputError: If a deme number has no name
    """
    if deme_names is None:
        return df

    deme_idx = df["deme"].astype(int)
    if (deme_idx < 1).any() or (deme_idx > len(deme_names)).any():
        raise InconsistentInputError(
            f"Found {deme_idx.max()} demes in the .arp file but "
            f"{len(deme_names)} deme names"
        )
    out = df.copy()
    out["deme"] = np.asarray(deme_names, dtype=object)[deme_idx.to_numpy() - 1]
    return out
