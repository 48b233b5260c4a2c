"""
PDAC Network Core Modules
=========================
Shared data structures and statistics for the PDAC interaction network.

This package contains:
- data_structures: DriverGene, DrugGeneInteraction, NetworkSummary, PipelineResult
- statistics: multiple-testing correction
"""

from .data_structures import (
    DriverGene,
    DrugGeneInteraction,
    NetworkSummary,
    PipelineResult,
)

from .statistics import apply_fdr_correction

__all__ = [
    # Data structures
    'DriverGene',
    'DrugGeneInteraction',
    'NetworkSummary',
    'PipelineResult',
    # Statistics
    'apply_fdr_correction',
]

__version__ = '1.0.0'
