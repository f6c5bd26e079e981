"""Data models for the fastsimcoal2 output reader.

Holds the locus metadata record, the marker kinds, and the containers passed
between the parsing stages. Tables are pandas DataFrames; the containers
carry the bookkeeping that travels with them (locus column ranges,
polymorphic positions, source file).
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import pandas as pd

from fsc_reader.exceptions import UnsupportedRequestError


class MarkerKind(str, Enum):
    """Biological data type of a locus."""

    DNA = "DNA"
    SNP = "SNP"
    MICROSAT = "MICROSAT"
    STANDARD = "STANDARD"

    @classmethod
    def parse(cls, value: "str | MarkerKind") -> "MarkerKind":
        """Case-insensitive lookup of a marker kind.

        Raises:
            UnsupportedRequestError: If the value isn't a known marker kind
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise UnsupportedRequestError(
                f"Unknown marker type '{value}'. "
                f"Valid options: {', '.join(k.value.lower() for k in cls)}"
            ) from None


@dataclass(slots=True, frozen=True)
class LocusInfo:
    """One block of loci as declared in the simulation parameter file.

    Attributes:
        name: Block name (e.g. "C1B1_DNA")
        chromosome: Chromosome number (1-based)
        fsc_type: Marker type written to fastsimcoal2 (SNP blocks are
            simulated as DNA)
        actual_type: Marker type the block represents
        mat_col_start: First raw matrix column of the block (1-based,
            inclusive; columns 1 and 2 are id and deme)
        mat_col_end: Last raw matrix column of the block (1-based, inclusive)
        chrom_pos_start: Position of the first site of the block on its
            chromosome
        dna_start: First character of the block within a DNA token
            (1-based, inclusive; None for the whole token)
        dna_end: Last character of the block within a DNA token
    """

    name: str
    chromosome: int
    fsc_type: MarkerKind
    actual_type: MarkerKind
    mat_col_start: int
    mat_col_end: int
    chrom_pos_start: int
    dna_start: int | None = None
    dna_end: int | None = None


@dataclass
class RawSampleData:
    """Sample data blocks pulled out of an .arp file.

    Attributes:
        matrix: One row per haplotype: id, deme (1-based block order as str)
            and one column per raw token (col3, col4, ...)
        poly_pos: Polymorphic positions (chromosome, position), or None when
            the file reports genotypes at every site
        file: Source .arp file
    """

    matrix: pd.DataFrame
    poly_pos: pd.DataFrame | None
    file: Path


@dataclass
class HaplotypeData:
    """Haploid table with loci mapped onto their columns.

    Attributes:
        table: id, deme and the data columns of every locus
        locus_cols: Locus name -> half-open range of column indices in table
        locus_types: Locus name -> marker kind the locus represents
        poly_pos: Annotated polymorphic positions, or None
        file: Source .arp file
    """

    table: pd.DataFrame
    locus_cols: dict[str, range]
    locus_types: dict[str, MarkerKind]
    poly_pos: pd.DataFrame | None = None
    file: Path | None = None

    @property
    def data_columns(self) -> list[str]:
        """Names of the data (non id/deme) columns."""
        return list(self.table.columns[2:])

    @property
    def num_haplotypes(self) -> int:
        return len(self.table)


@dataclass
class ArpReadResult:
    """Final output of reading one replicate.

    Attributes:
        genotypes: Genotype table, or tables keyed by chromosome prefix when
            split by chromosome
        poly_pos: Annotated polymorphic positions of the selected loci
        file: Source .arp file
    """

    genotypes: pd.DataFrame | dict[str, pd.DataFrame]
    poly_pos: pd.DataFrame | None = None
    file: Path | None = None
    options: dict = field(default_factory=dict)

    @property
    def tables(self) -> dict[str, pd.DataFrame]:
        """Genotype tables keyed by chromosome prefix ("all" when not split)."""
        if isinstance(self.genotypes, dict):
            return self.genotypes
        return {"all": self.genotypes}
