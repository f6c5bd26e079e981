"""fastsimcoal2 Arlequin Output Reader.

Parses the Arlequin-formatted .arp files written by fastsimcoal2 into
haplotype and genotype tables, using the locus layout that was used to
write the simulation parameter file.
"""

__version__ = "1.0.0"
__author__ = "Data Tecnica International"

from fsc_reader.main import arp_path, parse_genetic_data, read_arp, read_replicate

__all__ = ["arp_path", "parse_genetic_data", "read_arp", "read_replicate"]
