"""Main orchestration for reading fastsimcoal2 replicates.

Implements read_arp(), which coordinates all stages for one .arp file:
extracting the sample data blocks, mapping raw columns onto loci (full-site
or polymorphic-site layout), selecting loci, and formatting genotypes.
"""

import logging
import numbers
from collections.abc import Iterable
from pathlib import Path

import pandas as pd

from fsc_reader.config import Config
from fsc_reader.exceptions import UnsupportedRequestError
from fsc_reader.genotypes import (
    check_coded_snps,
    format_genotypes,
    resolve_deme_names,
    split_by_chromosome,
)
from fsc_reader.loci.all_sites import parse_all_sites
from fsc_reader.loci.poly_sites import parse_poly_sites
from fsc_reader.loci.select import drop_monomorphic, select_loci, subset_haplotypes
from fsc_reader.logging_config import get_progress_logger
from fsc_reader.models import ArpReadResult, HaplotypeData, MarkerKind
from fsc_reader.parsers.arp import parse_arp_file
from fsc_reader.parsers.locus_info import load_locus_info, validate_locus_info

logger = logging.getLogger(__name__)


def arp_path(folder: Path, label: str, sim: int | tuple[int, int] = (1, 1)) -> Path:
    """Path of the .arp file for a replicate.

    Args:
        folder: Folder the simulation was run in
        label: Simulation label
        sim: (replicate, sub-replicate), or a single sub-replicate number of
            replicate 1

    Returns:
        <folder>/<label>/<label>_<rep>_<sub>.arp

    Raises:
        ValueError: If sim doesn't hold one or two numbers
    """
    if isinstance(sim, numbers.Integral):
        sim = (1, sim)
    try:
        sim = tuple(sim)
    except TypeError:
        raise ValueError("'sim' must be a two-element tuple of integers.") from None
    if len(sim) != 2:
        raise ValueError("'sim' must be a two-element tuple of integers.")
    return Path(folder) / label / f"{label}_{int(sim[0])}_{int(sim[1])}.arp"


def parse_genetic_data(locus_info: pd.DataFrame, filepath: Path) -> HaplotypeData | None:
    """Read an .arp file into a haplotype table mapped onto loci.

    Args:
        locus_info: Validated locus table
        filepath: Path to the .arp file

    Returns:
        HaplotypeData, or None if the file holds no data or no polymorphic
        sites
    """
    progress = get_progress_logger()
    progress.info(f"reading {filepath}")
    raw = parse_arp_file(filepath)
    if raw is None:
        return None

    progress.info("parsing genetic data...")
    if raw.poly_pos is None:
        return parse_all_sites(locus_info, raw)
    return parse_poly_sites(locus_info, raw)


def read_arp(
    filepath: Path,
    locus_info: pd.DataFrame,
    ploidy: int,
    deme_names: list[str] | None = None,
    marker: str | Iterable[str] = "all",
    chrom: Iterable[int] | None = None,
    sep_chrom: bool = False,
    drop_mono: bool = False,
    as_genotypes: bool = True,
    one_col: bool = False,
    sep: str = "/",
    coded_snps: bool = False,
) -> ArpReadResult | None:
    """Read a fastsimcoal2 .arp file into a genotype table.

    Args:
        filepath: Path to the .arp file
        locus_info: Locus table of the simulation (not modified)
        ploidy: Ploidy the simulation was run with
        deme_names: Deme names in deme order (deme numbers kept if None)
        marker: Marker types to return
        chrom: Chromosomes to return (None for all)
        sep_chrom: Return one table per chromosome
        drop_mono: Drop monomorphic columns (full-site output only)
        as_genotypes: Combine haplotypes into individuals; haploid rows are
            returned if False or if ploidy is 1
        one_col: One column per locus column, allele copies joined by sep
        sep: Separator for joined ids and one-column genotypes
        coded_snps: Return diploid SNPs coded as 0/1/2

    Returns:
        ArpReadResult, or None if the replicate has no data or no
        polymorphic sites

    Raises:
        FileNotFoundError: If the .arp file doesn't exist
        LocusNotFoundError: If the selection matches no loci
        InconsistentInputError: If the file doesn't match the locus table
        UnsupportedRequestError: If the requested encoding isn't possible

    Example:
        >>> result = read_arp(arp_path("runs", "sim1", (1, 3)), info, ploidy=2,
        ...                   marker="snp", coded_snps=True)
        >>> result.genotypes.head()
    """
    filepath = Path(filepath)
    marker = [marker] if isinstance(marker, str) else list(marker)
    chrom = None if chrom is None else list(chrom)
    if not filepath.exists():
        raise FileNotFoundError(f"Can't find .arp file, '{filepath}'.")

    # Reject impossible requests before touching the data
    locus_info = validate_locus_info(locus_info)
    selected = select_loci(locus_info, marker, chrom)
    if coded_snps:
        if one_col:
            raise UnsupportedRequestError("one_col and coded_snps are mutually exclusive")
        check_coded_snps(
            {name: MarkerKind(kind) for name, kind in zip(selected["name"], selected["actual_type"])},
            ploidy,
        )

    hap = parse_genetic_data(locus_info, filepath)
    if hap is None:
        logger.info(f"Nothing to read in {filepath}")
        return None

    hap = subset_haplotypes(hap, selected)
    if drop_mono and hap.poly_pos is None:
        hap = drop_monomorphic(hap)

    if as_genotypes and ploidy > 1:
        get_progress_logger().info(f"formatting genotypes (ploidy {ploidy})...")
        genotypes = format_genotypes(hap, ploidy, one_col, sep, coded_snps, sep_chrom)
    elif sep_chrom:
        genotypes = split_by_chromosome(hap.table.reset_index(drop=True))
    else:
        genotypes = hap.table.reset_index(drop=True)

    if isinstance(genotypes, dict):
        genotypes = {k: resolve_deme_names(df, deme_names) for k, df in genotypes.items()}
    else:
        genotypes = resolve_deme_names(genotypes, deme_names)

    return ArpReadResult(
        genotypes=genotypes,
        poly_pos=hap.poly_pos,
        file=hap.file,
        options={
            "ploidy": ploidy,
            "marker": marker,
            "chrom": chrom,
            "sep_chrom": sep_chrom,
            "drop_mono": drop_mono,
            "as_genotypes": as_genotypes,
            "one_col": one_col,
            "sep": sep,
            "coded_snps": coded_snps,
        },
    )


def read_replicate(
    config: Config,
    sim: int | tuple[int, int] = (1, 1),
    locus_info: pd.DataFrame | None = None,
) -> ArpReadResult | None:
    """Read one replicate of a configured simulation run.

    Args:
        config: Run settings and read options
        sim: (replicate, sub-replicate) to read
        locus_info: Locus table; loaded from config.locus_info_file if None

    Returns:
        ArpReadResult, or None if the replicate has no data
    """
    if locus_info is None:
        locus_info = load_locus_info(config.locus_info_file)
    return read_arp(arp_path(config.folder, config.label, sim), locus_info, **config.read_options())
