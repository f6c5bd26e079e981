"""JSON report writer for read output.

Records what was read, with which options, and the shape of what came out,
so a directory of converted replicates can be audited later.
"""

import json
import tempfile
from datetime import datetime
from pathlib import Path

from fsc_reader import __version__
from fsc_reader.config import Config
from fsc_reader.models import ArpReadResult


class ReportWriter:
    """Writes a JSON report for one read replicate.

    Usage:
        writer = ReportWriter(config)
        result = read_replicate(config, sim)
        writer.write(output_path, result, output_files)
    """

    def __init__(self, config: Config) -> None:
        self.config = config
        self.start_time = datetime.now()

    @staticmethod
    def statistics(result: ArpReadResult) -> dict:
        """Counts describing the tables of a result."""
        tables = result.tables
        first = next(iter(tables.values()))
        return {
            "individuals": len(first),
            "demes": sorted(first["deme"].astype(str).unique().tolist()),
            "genotype_columns": {
                chrom: df.shape[1] - 2 for chrom, df in tables.items()
            },
            "polymorphic_sites": None if result.poly_pos is None else len(result.poly_pos),
            "loci": (
                None if result.poly_pos is None
                else result.poly_pos["name"].unique().tolist()
            ),
        }

    def write(
        self,
        output_path: Path,
        result: ArpReadResult,
        output_files: list[Path],
    ) -> None:
        """Write the JSON report atomically (temp file + rename).

        Args:
            output_path: Path for JSON report file
            result: Output of read_arp()
            output_files: Table files written for the result
        """
        end_time = datetime.now()

        report = {
            "metadata": {
                "version": __version__,
                "tool": "fsc-reader",
                "timestamp": end_time.isoformat(),
                "duration_seconds": (end_time - self.start_time).total_seconds(),
                "input_files": {
                    "arp_file": str(result.file),
                    "locus_info_file": str(self.config.locus_info_file),
                },
                "options": result.options,
            },
            "statistics": self.statistics(result),
            "output_files": [str(f) for f in output_files],
        }

        output_path.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=output_path.parent,
            suffix=".json.tmp",
            delete=False,
        ) as tmp:
            json.dump(report, tmp, indent=2)
            tmp_path = Path(tmp.name)

        tmp_path.replace(output_path)
