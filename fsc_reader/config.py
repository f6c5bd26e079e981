"""Configuration dataclass for the fastsimcoal2 output reader.

Run settings (where the simulation was written, its ploidy and deme names,
the locus layout) together with the options controlling how an .arp file is
turned into a genotype table.
"""

from dataclasses import dataclass, field
from pathlib import Path

VALID_MARKERS = {"dna", "snp", "microsat", "standard", "all"}


@dataclass
class Config:
    """Configuration for reading fastsimcoal2 replicates.

    Attributes:
        folder: Folder the simulation was run in
        label: Simulation label (name of the .par file without extension)
        locus_info_file: CSV/TSV describing the locus layout of the run
        ploidy: Number of haplotypes per individual used when simulating
        deme_names: Names of the demes, in deme order
        marker: Marker types to return ("all", "dna", "snp", ...)
        chrom: Chromosomes to return (None for all)
        sep_chrom: Return one table per chromosome
        drop_mono: Drop monomorphic columns (full-site output only)
        as_genotypes: Combine haplotypes into individuals
        one_col: One column per locus instead of one per allele copy
        sep: Separator for combined ids and one-column genotypes
        coded_snps: Return diploid SNPs coded as 0/1/2
        output_dir: Output directory for generated files
        generate_report: Write a JSON report next to the tables
    """

    folder: Path
    label: str
    locus_info_file: Path

    # Run settings
    ploidy: int = 2
    deme_names: list[str] | None = None

    # Locus selection
    marker: list[str] = field(default_factory=lambda: ["all"])
    chrom: list[int] | None = None

    # Output shape
    sep_chrom: bool = False
    drop_mono: bool = False
    as_genotypes: bool = True
    one_col: bool = False
    sep: str = "/"
    coded_snps: bool = False

    output_dir: Path | None = None

    generate_report: bool = True

    def __post_init__(self) -> None:
        """Coerce paths and set defaults."""
        if isinstance(self.folder, str):
            self.folder = Path(self.folder)
        if isinstance(self.locus_info_file, str):
            self.locus_info_file = Path(self.locus_info_file)
        if isinstance(self.marker, str):
            self.marker = [self.marker]

        if self.output_dir is None:
            self.output_dir = Path.cwd()
        elif isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)

    @property
    def arp_dir(self) -> Path:
        """Directory fastsimcoal2 writes the .arp files of this run to."""
        return self.folder / self.label

    def file_stem(self, sim: tuple[int, int]) -> str:
        """Stem of the .arp file for a (replicate, sub-replicate) pair."""
        return f"{self.label}_{sim[0]}_{sim[1]}"

    def get_output_path(self, filename: str) -> Path:
        """Get full output path for a file."""
        assert self.output_dir is not None  # Set in __post_init__
        return self.output_dir / filename

    def read_options(self) -> dict:
        """Keyword arguments for read_arp()."""
        return {
            "ploidy": self.ploidy,
            "deme_names": self.deme_names,
            "marker": self.marker,
            "chrom": self.chrom,
            "sep_chrom": self.sep_chrom,
            "drop_mono": self.drop_mono,
            "as_genotypes": self.as_genotypes,
            "one_col": self.one_col,
            "sep": self.sep,
            "coded_snps": self.coded_snps,
        }

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors.

        Returns:
            List of error messages (empty if valid)
        """
        errors: list[str] = []

        if not self.arp_dir.exists():
            errors.append(f"Simulation output directory not found: {self.arp_dir}")

        if not self.locus_info_file.exists():
            errors.append(f"Locus info file not found: {self.locus_info_file}")

        if self.output_dir is not None and not self.output_dir.exists():
            errors.append(f"Output directory does not exist: {self.output_dir}")

        if self.ploidy < 1:
            errors.append(f"ploidy must be at least 1: {self.ploidy}")

        invalid = {m.lower() for m in self.marker} - VALID_MARKERS
        if invalid:
            errors.append(
                f"Invalid marker type(s) {sorted(invalid)}. "
                f"Valid options: {sorted(VALID_MARKERS)}"
            )

        if self.chrom is not None and any(c < 1 for c in self.chrom):
            errors.append(f"Chromosomes are numbered from 1: {self.chrom}")

        if self.coded_snps and self.ploidy != 2:
            errors.append("coded_snps requires diploid data (ploidy = 2)")

        if self.coded_snps and self.one_col:
            errors.append("coded_snps and one_col are mutually exclusive")

        if self.deme_names is not None and len(set(self.deme_names)) != len(self.deme_names):
            errors.append(f"Deme names must be unique: {self.deme_names}")

        return errors
