"""Integration tests for reading replicates."""

import logging
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from fsc_reader import arp_path, parse_genetic_data, read_arp, read_replicate
from fsc_reader.config import Config
from fsc_reader.exceptions import (
    InconsistentInputError,
    LocusNotFoundError,
    UnsupportedRequestError,
)


class TestArpPath:
    """Tests for replicate file paths."""

    def test_rep_and_sub_rep(self) -> None:
        assert arp_path(Path("runs"), "sim", (2, 5)) == Path("runs/sim/sim_2_5.arp")

    def test_single_number_is_sub_rep(self) -> None:
        assert arp_path(Path("runs"), "sim", 3) == Path("runs/sim/sim_1_3.arp")

    def test_bad_sim(self) -> None:
        with pytest.raises(ValueError, match="two-element"):
            arp_path(Path("runs"), "sim", (1, 2, 3))

    def test_numpy_integers(self) -> None:
        """Replicate numbers taken from numpy arrays are accepted."""
        assert arp_path(Path("runs"), "sim", np.int64(3)) == Path("runs/sim/sim_1_3.arp")
        assert arp_path(Path("runs"), "sim", np.array([2, 5])) == Path("runs/sim/sim_2_5.arp")

    def test_non_integer_sim(self) -> None:
        with pytest.raises(ValueError, match="two-element"):
            arp_path(Path("runs"), "sim", 2.5)


class TestParseGeneticData:
    """Tests for dispatching on the file layout."""

    def test_full_site(self, locus_info: pd.DataFrame, full_site_arp: Path) -> None:
        hap = parse_genetic_data(locus_info, full_site_arp)

        assert hap.poly_pos is None
        assert len(hap.locus_cols) == 4

    def test_poly_site(self, locus_info: pd.DataFrame, poly_site_arp: Path) -> None:
        hap = parse_genetic_data(locus_info, poly_site_arp)

        assert hap.poly_pos is not None
        assert list(hap.locus_cols) == ["C1B1_DNA", "C1B2_SNP", "C3B1_STANDARD"]


class TestReadArp:
    """End-to-end tests for read_arp()."""

    def test_diploid_genotypes(self, locus_info: pd.DataFrame, full_site_arp: Path) -> None:
        result = read_arp(full_site_arp, locus_info, ploidy=2)
        gen = result.genotypes

        assert gen.shape == (3, 2 + 5 * 2)
        assert gen["id"].tolist() == ["1_1/1_2", "1_3/1_4", "2_1/2_2"]
        assert result.poly_pos is None
        assert result.file == full_site_arp
        assert result.options["ploidy"] == 2

    def test_haplotypes(self, locus_info: pd.DataFrame, full_site_arp: Path) -> None:
        """Haploid rows when genotypes aren't requested."""
        result = read_arp(full_site_arp, locus_info, ploidy=2, as_genotypes=False)

        assert result.genotypes["C1B1_DNA"].tolist() == [
            "ACG", "ACA", "ACG", "ACT", "TCG", "ACG",
        ]

    def test_haploid_simulation(self, locus_info: pd.DataFrame, full_site_arp: Path) -> None:
        result = read_arp(full_site_arp, locus_info, ploidy=1)

        assert len(result.genotypes) == 6
        assert "C1B1_DNA" in result.genotypes.columns

    def test_coded_snps(self, locus_info: pd.DataFrame, full_site_arp: Path) -> None:
        result = read_arp(full_site_arp, locus_info, ploidy=2, marker="snp", coded_snps=True)

        assert list(result.genotypes.columns) == ["id", "deme", "C1B2_SNP_L1", "C1B2_SNP_L2"]
        assert result.genotypes["C1B2_SNP_L2"].tolist() == [0, 1, 0]

    def test_drop_mono(self, locus_info: pd.DataFrame, full_site_arp: Path) -> None:
        result = read_arp(
            full_site_arp, locus_info, ploidy=2, marker="snp", one_col=True, drop_mono=True
        )

        assert list(result.genotypes.columns) == ["id", "deme", "C1B2_SNP_L2"]

    def test_chromosome_selection(self, locus_info: pd.DataFrame, full_site_arp: Path) -> None:
        result = read_arp(full_site_arp, locus_info, ploidy=2, chrom=[3], one_col=True)

        assert list(result.genotypes.columns) == ["id", "deme", "C3B1_STANDARD"]
        assert result.options["chrom"] == [3]

    def test_sep_chrom(self, locus_info: pd.DataFrame, full_site_arp: Path) -> None:
        result = read_arp(full_site_arp, locus_info, ploidy=2, sep_chrom=True)

        assert list(result.tables) == ["C1", "C2", "C3"]

    def test_sep_chrom_haplotypes(self, locus_info: pd.DataFrame, full_site_arp: Path) -> None:
        result = read_arp(full_site_arp, locus_info, ploidy=2, sep_chrom=True, as_genotypes=False)

        assert list(result.genotypes["C2"].columns) == ["id", "deme", "C2B1_MICROSAT"]
        assert len(result.genotypes["C2"]) == 6

    def test_deme_names(self, locus_info: pd.DataFrame, full_site_arp: Path) -> None:
        result = read_arp(full_site_arp, locus_info, ploidy=2, deme_names=["Pop1", "Pop2"])

        assert result.genotypes["deme"].tolist() == ["Pop1", "Pop1", "Pop2"]

    def test_poly_sites(self, locus_info: pd.DataFrame, poly_site_arp: Path) -> None:
        result = read_arp(poly_site_arp, locus_info, ploidy=2, one_col=True)

        assert list(result.genotypes.columns) == [
            "id", "deme", "C1B1_DNA", "C1B2_SNP", "C3B1_STANDARD",
        ]
        assert result.genotypes["C1B2_SNP"].tolist() == ["A/A", "T/A", "A/T"]
        assert result.poly_pos["name"].tolist() == ["C1B1_DNA", "C1B2_SNP", "C3B1_STANDARD"]

    def test_poly_sites_selection_without_sites(
        self, locus_info: pd.DataFrame, poly_site_arp: Path
    ) -> None:
        """Selecting only blocks without polymorphic sites gives no columns."""
        result = read_arp(poly_site_arp, locus_info, ploidy=2, marker="microsat")

        assert list(result.genotypes.columns) == ["id", "deme"]
        assert result.poly_pos.empty

    def test_locus_info_not_modified(
        self, locus_info: pd.DataFrame, full_site_arp: Path
    ) -> None:
        before = locus_info.copy()

        read_arp(full_site_arp, locus_info, ploidy=2, marker="snp")

        pd.testing.assert_frame_equal(locus_info, before)

    def test_monomorphic_returns_none(
        self,
        locus_info: pd.DataFrame,
        monomorphic_arp: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="fsc_reader"):
            assert read_arp(monomorphic_arp, locus_info, ploidy=2) is None

        assert "No polymorphic sites found" in caplog.text


class TestReadArpErrors:
    """Tests for rejected reads."""

    def test_missing_file(self, locus_info: pd.DataFrame, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Can't find .arp file"):
            read_arp(tmp_path / "sim_9_9.arp", locus_info, ploidy=2)

    def test_chromosome_out_of_range(
        self, locus_info: pd.DataFrame, full_site_arp: Path
    ) -> None:
        with pytest.raises(LocusNotFoundError):
            read_arp(full_site_arp, locus_info, ploidy=2, chrom=[5])

    def test_coded_snps_need_snp_marker(
        self, locus_info: pd.DataFrame, full_site_arp: Path
    ) -> None:
        with pytest.raises(UnsupportedRequestError, match='marker = "snp"'):
            read_arp(full_site_arp, locus_info, ploidy=2, coded_snps=True)

    def test_coded_snps_need_diploid(
        self, locus_info: pd.DataFrame, full_site_arp: Path
    ) -> None:
        with pytest.raises(UnsupportedRequestError, match="non-diploid"):
            read_arp(full_site_arp, locus_info, ploidy=3, marker="snp", coded_snps=True)

    def test_coded_snps_with_one_col(
        self, locus_info: pd.DataFrame, full_site_arp: Path
    ) -> None:
        with pytest.raises(UnsupportedRequestError):
            read_arp(
                full_site_arp, locus_info, ploidy=2, marker="snp", coded_snps=True, one_col=True
            )

    def test_ploidy_mismatch(self, locus_info: pd.DataFrame, full_site_arp: Path) -> None:
        """Six haplotypes aren't a whole number of tetraploids."""
        with pytest.raises(InconsistentInputError):
            read_arp(full_site_arp, locus_info, ploidy=4)

    def test_invalid_locus_info(self, locus_info: pd.DataFrame, full_site_arp: Path) -> None:
        with pytest.raises(InconsistentInputError):
            read_arp(full_site_arp, locus_info.drop(columns="name"), ploidy=2)


class TestReadReplicate:
    """Tests for reading through a Config."""

    def test_read_replicate(
        self, tmp_path: Path, locus_info_csv: Path, full_site_arp: Path
    ) -> None:
        config = Config(
            folder=tmp_path,
            label="sim",
            locus_info_file=locus_info_csv,
            marker=["snp"],
            one_col=True,
            output_dir=tmp_path,
        )

        result = read_replicate(config, (1, 1))

        assert result.file == full_site_arp
        assert result.genotypes["C1B2_SNP_L2"].tolist() == ["A/A", "T/A", "A/A"]

    def test_read_replicate_missing(self, tmp_path: Path, locus_info_csv: Path) -> None:
        config = Config(folder=tmp_path, label="sim", locus_info_file=locus_info_csv)

        with pytest.raises(FileNotFoundError):
            read_replicate(config, (4, 1))
