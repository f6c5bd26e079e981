"""Parsers for fastsimcoal2 .arp files and locus tables."""

from fsc_reader.parsers.arp import (
    find_sample_blocks,
    parse_arp_file,
    parse_poly_positions,
    parse_sample_blocks,
)
from fsc_reader.parsers.locus_info import (
    LOCUS_INFO_COLUMNS,
    load_locus_info,
    locus_table,
    validate_locus_info,
)

__all__ = [
    # .arp files
    "parse_arp_file",
    "parse_poly_positions",
    "parse_sample_blocks",
    "find_sample_blocks",
    # Locus tables
    "LOCUS_INFO_COLUMNS",
    "load_locus_info",
    "locus_table",
    "validate_locus_info",
]
