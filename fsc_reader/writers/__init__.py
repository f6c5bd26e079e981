"""Output writers for genotype tables and JSON reports."""

from fsc_reader.writers.report import ReportWriter
from fsc_reader.writers.table import write_genotype_tables

__all__ = ["ReportWriter", "write_genotype_tables"]
