"""Tests for I/O helpers, configuration and logging setup."""

import gzip
import logging
from pathlib import Path

import pytest

from fsc_reader.config import Config
from fsc_reader.io_utils import is_gzipped, read_clean_lines, smart_open
from fsc_reader.logging_config import (
    CONSOLE_HANDLER,
    FILE_HANDLER,
    PROGRESS_HANDLER,
    get_progress_logger,
    reset_logging,
    setup_logging,
)


@pytest.fixture
def clean_logging():
    """Restore logging state after a test."""
    reset_logging()
    yield
    reset_logging()


class TestIoUtils:
    """Tests for text and gzip reading."""

    def test_is_gzipped(self, tmp_path: Path) -> None:
        plain = tmp_path / "plain.arp"
        plain.write_text("[Profile]\n")
        packed = tmp_path / "packed.arp.gz"
        with gzip.open(packed, "wt") as f:
            f.write("[Profile]\n")

        assert not is_gzipped(plain)
        assert is_gzipped(packed)

    def test_smart_open_gzip(self, tmp_path: Path) -> None:
        packed = tmp_path / "packed.arp"
        with gzip.open(packed, "wt") as f:
            f.write("line 1\nline 2\n")

        with smart_open(packed) as f:
            assert f.read() == "line 1\nline 2\n"

    def test_read_clean_lines(self, tmp_path: Path) -> None:
        """Lines are trimmed and blank lines dropped."""
        path = tmp_path / "sim_1_1.arp"
        path.write_bytes(b"  SampleData= {\r\n\r\n1_1\t1\tACG  \r\n   \r\n}\r\n")

        assert read_clean_lines(path) == ["SampleData= {", "1_1\t1\tACG", "}"]

    def test_read_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_clean_lines(tmp_path / "missing.arp")


class TestConfig:
    """Tests for run configuration."""

    def test_defaults(self, tmp_path: Path) -> None:
        config = Config(folder=str(tmp_path), label="sim", locus_info_file="info.csv")

        assert config.folder == tmp_path
        assert config.locus_info_file == Path("info.csv")
        assert config.output_dir == Path.cwd()
        assert config.marker == ["all"]
        assert config.ploidy == 2

    def test_marker_string(self, tmp_path: Path) -> None:
        config = Config(folder=tmp_path, label="sim", locus_info_file=tmp_path, marker="snp")

        assert config.marker == ["snp"]

    def test_paths(self, tmp_path: Path) -> None:
        config = Config(
            folder=tmp_path, label="sim", locus_info_file=tmp_path, output_dir=tmp_path / "out"
        )

        assert config.arp_dir == tmp_path / "sim"
        assert config.file_stem((2, 7)) == "sim_2_7"
        assert config.get_output_path("x.csv") == tmp_path / "out" / "x.csv"

    def test_read_options(self, tmp_path: Path) -> None:
        config = Config(
            folder=tmp_path, label="sim", locus_info_file=tmp_path,
            ploidy=1, chrom=[2], sep=";",
        )

        options = config.read_options()

        assert options["ploidy"] == 1
        assert options["chrom"] == [2]
        assert options["sep"] == ";"
        assert "folder" not in options

    def test_validate_ok(
        self, tmp_path: Path, full_site_arp: Path, locus_info_csv: Path
    ) -> None:
        config = Config(
            folder=tmp_path, label="sim", locus_info_file=locus_info_csv, output_dir=tmp_path
        )

        assert config.validate() == []

    def test_validate_errors(self, tmp_path: Path) -> None:
        config = Config(
            folder=tmp_path,
            label="missing",
            locus_info_file=tmp_path / "missing.csv",
            output_dir=tmp_path / "nowhere",
            ploidy=3,
            marker=["snp", "indel"],
            chrom=[0],
            coded_snps=True,
            one_col=True,
            deme_names=["A", "A"],
        )

        errors = config.validate()

        assert len(errors) == 8
        assert any("indel" in e for e in errors)
        assert any("diploid" in e for e in errors)


class TestLogging:
    """Tests for logging setup."""

    def test_setup_logging_creates_log_file(self, tmp_path: Path, clean_logging) -> None:
        log_file = setup_logging(tmp_path, job_name="sim")

        assert log_file.parent == tmp_path / "logs"
        assert log_file.name.startswith("sim_")

        logging.getLogger("fsc_reader.loci").debug("written to file")
        for handler in logging.getLogger("fsc_reader").handlers:
            handler.flush()
        assert "written to file" in log_file.read_text()

    def test_setup_logging_leaves_root_alone(self, tmp_path: Path, clean_logging) -> None:
        root_handlers = list(logging.getLogger().handlers)

        setup_logging(tmp_path)

        assert logging.getLogger().handlers == root_handlers

    def test_setup_logging_twice_replaces_handlers(self, tmp_path: Path, clean_logging) -> None:
        setup_logging(tmp_path / "a")
        second = setup_logging(tmp_path / "b")

        names = [h.get_name() for h in logging.getLogger("fsc_reader").handlers]
        assert names.count(FILE_HANDLER) == 1
        assert names.count(CONSOLE_HANDLER) == 1
        file_handler = next(
            h for h in logging.getLogger("fsc_reader").handlers if h.get_name() == FILE_HANDLER
        )
        assert Path(file_handler.baseFilename) == second

    def test_reset_logging(self, tmp_path: Path, clean_logging) -> None:
        setup_logging(tmp_path)
        get_progress_logger()

        reset_logging()

        ours = {CONSOLE_HANDLER, FILE_HANDLER, PROGRESS_HANDLER}
        for name in ("fsc_reader", "fsc_reader.progress"):
            assert not [h for h in logging.getLogger(name).handlers if h.get_name() in ours]


class TestProgressLogger:
    """Tests for the step announcement logger."""

    def test_progress_logger(self, clean_logging) -> None:
        progress = get_progress_logger()

        assert progress.name == "fsc_reader.progress"
        assert not progress.propagate
        assert [h.get_name() for h in progress.handlers].count(PROGRESS_HANDLER) == 1

    def test_console_handler_added_next_to_foreign_handlers(self, clean_logging) -> None:
        """A handler attached by someone else doesn't suppress the console output."""
        foreign = logging.NullHandler()
        logging.getLogger("fsc_reader.progress").addHandler(foreign)
        try:
            progress = get_progress_logger()
            get_progress_logger()

            names = [h.get_name() for h in progress.handlers]
            assert names.count(PROGRESS_HANDLER) == 1
            assert foreign in progress.handlers
        finally:
            logging.getLogger("fsc_reader.progress").removeHandler(foreign)
