"""Typer CLI for the fastsimcoal2 output reader.

Usage:
    # Replicate 1, sub-replicate 1 of run "sim" in ./runs, all loci
    fsc-reader read -f runs -l sim -i runs/sim_locus_info.csv

    # SNPs of chromosome 2 from replicate 3, coded 0/1/2
    fsc-reader read -f runs -l sim -i info.csv --rep 3 --marker snp --chrom 2 --coded-snps
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

app = typer.Typer(
    name="fsc-reader",
    help="Convert fastsimcoal2 Arlequin output into genotype tables",
    add_completion=False,
)

console = Console()


@app.callback()
def callback() -> None:
    """Convert fastsimcoal2 Arlequin output into genotype tables."""


@app.command()
def read(
    folder: Annotated[
        Path,
        typer.Option(
            "--folder", "-f",
            help="Folder the simulation was run in",
            exists=True,
            file_okay=False,
            dir_okay=True,
        ),
    ],
    label: Annotated[
        str,
        typer.Option(
            "--label", "-l",
            help="Simulation label (.arp files are in <folder>/<label>/)",
        ),
    ],
    locus_info: Annotated[
        Path,
        typer.Option(
            "--locus-info", "-i",
            help="CSV/TSV locus table of the simulation",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    rep: Annotated[
        int,
        typer.Option("--rep", help="Replicate number", min=1),
    ] = 1,
    sub_rep: Annotated[
        int,
        typer.Option("--sub-rep", help="Sub-replicate number", min=1),
    ] = 1,
    ploidy: Annotated[
        int,
        typer.Option("--ploidy", "-p", help="Ploidy used in the simulation", min=1),
    ] = 2,
    deme_name: Annotated[
        list[str] | None,
        typer.Option(
            "--deme-name",
            help="Deme name, in deme order (repeat for each deme)",
        ),
    ] = None,
    marker: Annotated[
        list[str] | None,
        typer.Option(
            "--marker", "-m",
            help="Marker type to return: all, dna, snp, microsat, standard (repeatable)",
        ),
    ] = None,
    chrom: Annotated[
        list[int] | None,
        typer.Option("--chrom", "-c", help="Chromosome to return (repeatable)", min=1),
    ] = None,
    sep_chrom: Annotated[
        bool,
        typer.Option("--sep-chrom", help="Write one table per chromosome"),
    ] = False,
    drop_mono: Annotated[
        bool,
        typer.Option("--drop-mono", help="Drop monomorphic sites"),
    ] = False,
    haploid: Annotated[
        bool,
        typer.Option("--haploid", help="Return haplotypes instead of genotypes"),
    ] = False,
    one_col: Annotated[
        bool,
        typer.Option("--one-col", help="One column per locus, alleles joined by --sep"),
    ] = False,
    sep: Annotated[
        str,
        typer.Option("--sep", help="Allele and id separator"),
    ] = "/",
    coded_snps: Annotated[
        bool,
        typer.Option("--coded-snps", help="Code diploid SNPs as 0/1/2"),
    ] = False,
    output_dir: Annotated[
        Path | None,
        typer.Option(
            "--output-dir", "-o",
            help="Output directory (default: current directory)",
            file_okay=False,
            dir_okay=True,
        ),
    ] = None,
    no_report: Annotated[
        bool,
        typer.Option("--no-report", help="Skip generating JSON report"),
    ] = False,
    log_dir: Annotated[
        Path | None,
        typer.Option("--log-dir", help="Write a rotating debug log under <dir>/logs"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
) -> None:
    """Read one replicate's .arp file and write it as CSV.

    Example usage:

        # Diploid genotypes, all loci
        fsc-reader read -f runs -l sim -i info.csv

        # Microsatellites of replicate 2, sub-replicate 5, one column per locus
        fsc-reader read -f runs -l sim -i info.csv --rep 2 --sub-rep 5 -m microsat --one-col
    """
    from fsc_reader.config import Config
    from fsc_reader.exceptions import FscReadError
    from fsc_reader.logging_config import setup_logging
    from fsc_reader.main import read_replicate
    from fsc_reader.writers import ReportWriter, write_genotype_tables

    if log_dir is not None:
        log_file = setup_logging(
            log_dir,
            job_name=label,
            console_level=logging.INFO if verbose else logging.WARNING,
        )
        console.print(f"Log file:           {log_file}")
    elif verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if output_dir is None:
        output_dir = Path.cwd()
    output_dir.mkdir(parents=True, exist_ok=True)

    config = Config(
        folder=folder,
        label=label,
        locus_info_file=locus_info,
        ploidy=ploidy,
        deme_names=deme_name or None,
        marker=marker or ["all"],
        chrom=chrom or None,
        sep_chrom=sep_chrom,
        drop_mono=drop_mono,
        as_genotypes=not haploid,
        one_col=one_col,
        sep=sep,
        coded_snps=coded_snps,
        output_dir=output_dir,
        generate_report=not no_report,
    )
    sim = (rep, sub_rep)
    stem = config.file_stem(sim)

    console.print(f"Simulation folder:  {config.arp_dir}")
    console.print(f"Replicate:          {rep}.{sub_rep}")
    console.print(f"Locus info:         {config.locus_info_file}")
    console.print(f"Markers:            {', '.join(config.marker)}")
    if config.chrom:
        console.print(f"Chromosomes:        {', '.join(map(str, config.chrom))}")
    console.print("")

    errors = config.validate()
    if errors:
        for error in errors:
            console.print(f"[red]ERROR:[/red] {error}")
        raise typer.Exit(code=1)

    try:
        result = read_replicate(config, sim)
    except (FileNotFoundError, FscReadError) as e:
        console.print(f"[red]ERROR:[/red] {e}")
        raise typer.Exit(code=1)

    if result is None:
        console.print(
            f"[yellow]Warning:[/yellow] no data in replicate {rep}.{sub_rep}, nothing written"
        )
        return

    output_files = write_genotype_tables(result, output_dir, stem)
    if config.generate_report:
        report_file = config.get_output_path(f"{stem}-report.json")
        ReportWriter(config).write(report_file, result, output_files)
        output_files.append(report_file)

    console.print("[bold]Output files generated:[/bold]")
    for f in output_files:
        console.print(f"  {f}")
    console.print("\n[green]Done.[/green]\n")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
