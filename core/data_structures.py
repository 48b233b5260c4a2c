"""
Core Data Structures for the PDAC Interaction Network
=====================================================
Dataclasses representing driver genes, drug hits, network summaries and
pipeline results.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd


@dataclass(frozen=True)
class DriverGene:
    """Driver gene with its significance fields"""
    symbol: str
    p_value: Optional[float] = None
    q_value: Optional[float] = None

    def __hash__(self):
        return hash(self.symbol)

    def __eq__(self, other):
        if not isinstance(other, DriverGene):
            return False
        return self.symbol == other.symbol


@dataclass
class DrugGeneInteraction:
    """
    A single drug-gene interaction returned by DGIdb.

    Attributes:
        gene: Gene symbol as it was originally requested
        drug: Drug name
        literature_count: Number of supporting publications (PMIDs)
        interaction_score: DGIdb interaction score (0 when absent)
        interaction_types: e.g. ['inhibitor']
        sources: Databases reporting the interaction
        queried_as: Symbol actually matched (differs when a suggestion was used)
    """
    gene: str
    drug: str
    literature_count: int = 0
    interaction_score: float = 0.0
    interaction_types: List[str] = field(default_factory=list)
    sources: List[str] = field(default_factory=list)
    queried_as: Optional[str] = None

    def rank_key(self) -> Tuple[int, float, str]:
        """Sort key for min(): most literature, then highest score, then drug name"""
        return (-self.literature_count, -self.interaction_score, self.drug.lower())

    def to_row(self) -> Dict[str, Any]:
        return {
            'Gene': self.gene,
            'Drug': self.drug,
            'Literature_Count': self.literature_count,
            'Interaction_Score': self.interaction_score,
            'Interaction_Types': ','.join(self.interaction_types),
            'Queried_As': self.queried_as or self.gene,
        }


@dataclass
class NetworkSummary:
    """Counts and hubs of a built interaction graph"""
    n_nodes: int
    n_edges: int
    role_counts: Dict[str, int]
    category_counts: Dict[str, int]
    density: float
    n_components: int
    top_hubs: List[Tuple[str, int]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'n_nodes': self.n_nodes,
            'n_edges': self.n_edges,
            'role_counts': dict(self.role_counts),
            'category_counts': dict(self.category_counts),
            'density': round(self.density, 4),
            'n_components': self.n_components,
            'top_hubs': [list(h) for h in self.top_hubs],
        }


@dataclass
class PipelineResult:
    """
    Everything produced by one pipeline run.

    Tables are pandas DataFrames; ``graph`` is a networkx.Graph.
    ``stage_counts`` records row counts after each stage so monotone
    reduction through the filters can be checked.
    """
    drivers: List[DriverGene]
    essentials: set
    sl_unified: pd.DataFrame
    sl_filtered: pd.DataFrame
    sl_edges: pd.DataFrame
    comutation_filtered: Optional[pd.DataFrame] = None
    comutation_edges: Optional[pd.DataFrame] = None
    combined: Optional[pd.DataFrame] = None
    drug_targets: Optional[pd.DataFrame] = None
    graph: Any = None
    summary: Optional[NetworkSummary] = None
    stage_counts: Dict[str, int] = field(default_factory=dict)
    figures: List[str] = field(default_factory=list)
