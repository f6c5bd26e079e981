"""Pytest fixtures for fsc_reader tests."""

from pathlib import Path

import pandas as pd
import pytest

from fsc_reader.models import LocusInfo, MarkerKind
from fsc_reader.parsers.locus_info import locus_table

ARP_HEADER = """[Profile]
    Title="fastsimcoal2 simulation"
    NbSamples=2
    GenotypicData=0
    GameticPhase=0
    RecessiveData=0
    DataType=DNA
    LocusSeparator=WHITESPACE
    MissingData='?'

[Data]
    [[Samples]]
"""

# Two demes of 4 and 2 haplotypes. Raw columns: col3 is a DNA token holding
# C1B1_DNA (characters 1-3) and C1B2_SNP (characters 4-5), col4 a
# microsatellite, col5 a standard marker.
FULL_SITE_SAMPLES = """
        SampleName="Sample 1"
        SampleSize=4
        SampleData= {
1_1\t1\tACGTA\t12\tA
1_2\t1\tACATA\t14\tC
1_3\t1\tACGTT\t12\tC
1_4\t1\tACTTA\t13\tC
}

        SampleName="Sample 2"
        SampleSize=2
        SampleData= {
2_1\t1\tTCGTA\t15\tA
2_2\t1\tACGTA\t12\tA
}
"""

# Polymorphic sites only: positions 1 (C1B1_DNA) and 4 (C1B2_SNP) share the
# DNA token in col3, position 0 of chromosome 3 (C3B1_STANDARD) is col4.
POLY_SITE_HEADER = """#2 polymorphic positions on chromosome 1
#1, 4
#0 polymorphic positions on chromosome 2

#1 polymorphic positions on chromosome 3
#0
"""

POLY_SITE_SAMPLES = """
        SampleName="Sample 1"
        SampleSize=4
        SampleData= {
1_1\t1\tGA\tA
1_2\t1\tAA\tC
1_3\t1\tGT\tC
1_4\t1\tTA\tC
}

        SampleName="Sample 2"
        SampleSize=2
        SampleData= {
2_1\t1\tGA\tA
2_2\t1\tGT\tA
}
"""


def write_arp(path: Path, body: str) -> Path:
    """Write an .arp file with a standard header."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(ARP_HEADER + body)
    return path


@pytest.fixture
def loci() -> list[LocusInfo]:
    """Locus layout of the test simulation."""
    return [
        LocusInfo("C1B1_DNA", 1, MarkerKind.DNA, MarkerKind.DNA, 3, 3, 0, 1, 3),
        LocusInfo("C1B2_SNP", 1, MarkerKind.DNA, MarkerKind.SNP, 3, 3, 3, 4, 5),
        LocusInfo("C2B1_MICROSAT", 2, MarkerKind.MICROSAT, MarkerKind.MICROSAT, 4, 4, 0),
        LocusInfo("C3B1_STANDARD", 3, MarkerKind.STANDARD, MarkerKind.STANDARD, 5, 5, 0),
    ]


@pytest.fixture
def locus_info(loci: list[LocusInfo]) -> pd.DataFrame:
    """Validated locus table of the test simulation."""
    return locus_table(loci)


@pytest.fixture
def full_site_arp(tmp_path: Path) -> Path:
    """.arp file with genotypes at every site."""
    return write_arp(tmp_path / "sim" / "sim_1_1.arp", FULL_SITE_SAMPLES)


@pytest.fixture
def poly_site_arp(tmp_path: Path) -> Path:
    """.arp file with polymorphic sites only."""
    return write_arp(tmp_path / "sim" / "sim_1_2.arp", POLY_SITE_HEADER + POLY_SITE_SAMPLES)


@pytest.fixture
def monomorphic_arp(tmp_path: Path) -> Path:
    """.arp file whose chromosomes report no polymorphic sites."""
    return write_arp(
        tmp_path / "sim" / "sim_1_3.arp",
        "#0 polymorphic positions on chromosome 1\n" + POLY_SITE_SAMPLES,
    )


@pytest.fixture
def locus_info_csv(tmp_path: Path, locus_info: pd.DataFrame) -> Path:
    """Locus table written as CSV with R-style dotted column names."""
    path = tmp_path / "sim_locus_info.csv"
    locus_info.rename(columns=lambda c: c.replace("_", ".")).to_csv(path, index=False)
    return path
