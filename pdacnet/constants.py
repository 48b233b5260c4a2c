#!/usr/bin/env python3
"""
Canonical constants for the PDAC interaction network
=====================================================
Single source of truth for source definitions, confidence tiers, column
aliases, colours and API endpoints. All other modules should import from
here instead of maintaining their own copies.
"""

from typing import Dict, List, Tuple

# ---------------------------------------------------------------------------
# EXPERIMENTAL CONFIDENCE
# ---------------------------------------------------------------------------

CONFIDENCE_WEIGHTS: Dict[str, float] = {
    'high': 1.0,     # direct experimental screen
    'medium': 0.6,   # curated literature / cohort statistics
    'low': 0.3,      # computational prediction
}

# ---------------------------------------------------------------------------
# DEFAULT SYNTHETIC-LETHALITY SOURCES
# Paths are relative to the data directory.
# ---------------------------------------------------------------------------

DEFAULT_SL_SOURCES: List[Dict] = [
    {
        'source_id': 'synlethdb',
        'path': 'Human_SL.csv',
        'fmt': 'csv',
        'columns': {'n1.name': 'GeneA', 'n2.name': 'GeneB',
                    'r.statistic_score': 'Score', 'r.methods': 'Evidence'},
        'evidence': 'SynLethDB curated',
        'confidence': 'medium',
    },
    {
        'source_id': 'biogrid',
        'path': 'BIOGRID-SL.tab3.txt',
        'fmt': 'tsv',
        'columns': {'Official Symbol Interactor A': 'GeneA',
                    'Official Symbol Interactor B': 'GeneB',
                    'Score': 'Score', 'Experimental System': 'Evidence'},
        'row_filter': {'Experimental System': ['Synthetic Lethality']},
        'evidence': 'BioGRID genetic interaction',
        'confidence': 'high',
    },
    {
        'source_id': 'crispr_screen',
        'path': 'crispr_double_knockout.xlsx',
        'fmt': 'excel',
        'columns': {'Gene1': 'GeneA', 'Gene2': 'GeneB', 'GI score': 'Score'},
        'evidence': 'CRISPR double knockout',
        'confidence': 'high',
    },
    {
        'source_id': 'prediction',
        'path': 'predicted_sl_pairs.tsv',
        'fmt': 'tsv',
        'columns': {'gene1': 'GeneA', 'gene2': 'GeneB', 'score': 'Score'},
        'evidence': 'Computational prediction',
        'confidence': 'low',
    },
]

DEFAULT_DRIVER_FILE = 'pdac_driver_genes.tsv'
DEFAULT_ESSENTIAL_FILE = 'core_essential_genes.tsv'
DEFAULT_COMUTATION_FILE = 'pdac_comutation.tsv'

DRIVER_Q_THRESHOLD = 0.1
COMUTATION_Q_THRESHOLD = 0.05
COMUTATION_CONFIDENCE = 'medium'

# ---------------------------------------------------------------------------
# COLUMN ALIASES (lower-cased raw name -> canonical name)
# ---------------------------------------------------------------------------

COLUMN_ALIASES: Dict[str, str] = {
    # driver lists (IntOGen / MutSigCV style)
    'symbol': 'Symbol',
    'gene': 'Symbol',
    'gene_symbol': 'Symbol',
    'hugo_symbol': 'Symbol',
    'essentials': 'Symbol',
    'pvalue': 'p_value',
    'p-value': 'p_value',
    'p_value': 'p_value',
    'pvalue_combination': 'p_value',
    'qvalue': 'q_value',
    'q-value': 'q_value',
    'q_value': 'q_value',
    'qvalue_combination': 'q_value',
    # cBioPortal mutual exclusivity export
    'a': 'GeneA',
    'b': 'GeneB',
    'log2 odds ratio': 'Log2_Odds_Ratio',
    'tendency': 'Tendency',
}

UNIFIED_COLUMNS: List[str] = [
    'GeneA', 'GeneB', 'Score', 'Evidence', 'Confidence', 'Confidence_Weight', 'source',
]

AGGREGATED_COLUMNS: List[str] = [
    'GeneA', 'GeneB', 'Count', 'N_Sources', 'Composite_Score', 'Max_Score',
    'Evidence', 'source', 'Category',
]

COMBINED_COLUMNS: List[str] = [
    'GeneA', 'GeneB', 'Interaction_Type', 'Score', 'Composite_Score',
    'Evidence', 'source', 'Category',
]

# ---------------------------------------------------------------------------
# EDGE CATEGORIES
# ---------------------------------------------------------------------------

# Checked in order; first threshold met wins.
CATEGORY_THRESHOLDS: List[Tuple[str, float]] = [
    ('strong', 1.5),
    ('moderate', 0.75),
    ('weak', float('-inf')),
]

MISSING_SCORE_FILL = 0.5

TENDENCY_LABELS: Dict[str, str] = {
    'co-occurrence': 'co-occurring',
    'mutual exclusivity': 'mutually exclusive',
}

# ---------------------------------------------------------------------------
# COLOURS
# ---------------------------------------------------------------------------

ROLE_COLORS: Dict[str, str] = {
    'driver': '#d62728',   # red
    'partner': '#1f77b4',  # blue
    'drug': '#2ca02c',     # green
}

EDGE_COLORS: Dict[str, str] = {
    'strong': '#222222',
    'moderate': '#7f7f7f',
    'weak': '#c7c7c7',
    'co_mutation': '#ff7f0e',
    'drug_target': '#2ca02c',
}

LAYOUTS = ('spring', 'kamada_kawai')

# ---------------------------------------------------------------------------
# DGIdb
# ---------------------------------------------------------------------------

# v2 REST layout (interactions.json?genes=). The public service no longer
# serves it; live runs must point `dgidb_url` at a host that does.
DGIDB_BASE_URL = "https://dgidb.org/api/v2"
DGIDB_TIMEOUT = 15
DGIDB_RATE_LIMIT_DELAY = 0.2
CACHE_MAX_AGE_SECONDS = 7 * 24 * 3600
