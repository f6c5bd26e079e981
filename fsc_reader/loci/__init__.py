"""Reconstruction and selection of loci from raw sample matrices."""

from fsc_reader.loci.all_sites import parse_all_sites
from fsc_reader.loci.poly_sites import parse_poly_sites, resolve_positions
from fsc_reader.loci.select import (
    drop_monomorphic,
    select_haplotypes,
    select_loci,
    subset_haplotypes,
)

__all__ = [
    "parse_all_sites",
    "parse_poly_sites",
    "resolve_positions",
    "select_loci",
    "subset_haplotypes",
    "select_haplotypes",
    "drop_monomorphic",
]
