"""
PDAC Interaction Network
========================
Candidate synthetic-lethality / co-mutation network for pancreatic ductal
adenocarcinoma, filtered against driver and core-essential gene lists and
annotated with DGIdb drugs.
"""

from pdacnet.utils import sanitize_name, normalize_symbol, pair_key
from pdacnet.config import PipelineConfig, SourceSpec

__all__ = [
    "sanitize_name",
    "normalize_symbol",
    "pair_key",
    "PipelineConfig",
    "SourceSpec",
]

# Submodules
# - pdacnet.loaders: flat-file readers
# - pdacnet.evidence: unification, filtering, aggregation, combined table
# - pdacnet.graph: networkx graph and figures
# - pdacnet.drug_annotation: DGIdbClient, annotate_partners
