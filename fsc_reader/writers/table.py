"""CSV writers for genotype tables.

One CSV per table (per chromosome when the result was split) plus, for
polymorphic-site-only output, the annotated polymorphic positions.
"""

from pathlib import Path

from fsc_reader.models import ArpReadResult

POLY_POS_COLUMNS = ["chromosome", "position", "name", "actual_type", "mat_col", "dna_pos"]


def write_genotype_tables(
    result: ArpReadResult,
    output_dir: Path,
    file_stem: str,
) -> list[Path]:
    """Write the tables of a read result as CSV files.

    Args:
        result: Output of read_arp()
        output_dir: Directory for output files
        file_stem: Base filename (usually the .arp file stem)

    Returns:
        Paths of the files written: <stem>.csv or <stem>_<chrom>.csv for each
        table, then <stem>_poly_pos.csv if there are polymorphic positions
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []

    if isinstance(result.genotypes, dict):
        for chrom, df in result.genotypes.items():
            path = output_dir / f"{file_stem}_{chrom}.csv"
            df.to_csv(path, index=False)
            written.append(path)
    else:
        path = output_dir / f"{file_stem}.csv"
        result.genotypes.to_csv(path, index=False)
        written.append(path)

    if result.poly_pos is not None:
        path = output_dir / f"{file_stem}_poly_pos.csv"
        # mat_col is written 1-based, like the locus table's raw columns
        poly_pos = result.poly_pos[POLY_POS_COLUMNS].assign(
            mat_col=result.poly_pos["mat_col"] + 1
        )
        poly_pos.to_csv(path, index=False)
        written.append(path)

    return written
