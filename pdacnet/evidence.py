#!/usr/bin/env python3
"""
Evidence unification, filtering and aggregation
===============================================
Turns per-source interaction tables into one scored, deduplicated edge list.

Stages:
1. tag_source / unify_sources  - common schema with experimental confidence
2. filter_interactions         - keep driver-touching, drop core-essential pairs
3. aggregate_interactions      - collapse duplicate pairs into a composite score
4. combine_networks            - union of SL and co-mutation edges with
                                 descriptive score labels
"""

import logging
from typing import Iterable, List, Set, Union

import pandas as pd

from core.data_structures import DriverGene
from pdacnet.config import SourceSpec
from pdacnet.constants import (
    AGGREGATED_COLUMNS, CATEGORY_THRESHOLDS, COMBINED_COLUMNS,
    COMUTATION_CONFIDENCE, CONFIDENCE_WEIGHTS, MISSING_SCORE_FILL,
    TENDENCY_LABELS, UNIFIED_COLUMNS,
)
from pdacnet.utils import pair_key

logger = logging.getLogger(__name__)

SL_TYPE = 'synthetic_lethality'
COMUTATION_TYPE = 'co_mutation'
COMUTATION_SOURCE = 'comutation'


# ============================================================================
# UNIFICATION
# ============================================================================

def tag_source(df: pd.DataFrame, spec: SourceSpec) -> pd.DataFrame:
    """Attach confidence tier, weight and source id to a loaded source"""
    tagged = df.copy()
    tagged['Confidence'] = spec.confidence
    tagged['Confidence_Weight'] = spec.weight
    tagged['source'] = spec.source_id
    return tagged


def unify_sources(frames: Iterable[pd.DataFrame]) -> pd.DataFrame:
    """Concatenate tagged source tables into the unified schema"""
    frames = [f[UNIFIED_COLUMNS] for f in frames if len(f)]
    if not frames:
        return pd.DataFrame(columns=UNIFIED_COLUMNS)
    unified = pd.concat(frames, ignore_index=True)
    counts = unified['source'].value_counts().to_dict()
    logger.info(f"Unified {len(unified)} interactions from {len(counts)} sources: {counts}")
    return unified


# ============================================================================
# DRIVER / ESSENTIAL FILTER
# ============================================================================

def _symbols(genes: Iterable[Union[str, DriverGene]]) -> Set[str]:
    return {g.symbol if isinstance(g, DriverGene) else g for g in genes}


def filter_interactions(df: pd.DataFrame,
                        drivers: Iterable[Union[str, DriverGene]],
                        essentials: Iterable[str]) -> pd.DataFrame:
    """
    Keep interactions touching at least one driver gene and drop any
    involving a core-essential gene.

    Rows keep their index so the result can be checked against the input.
    Each kept row is oriented with the driver as GeneA (alphabetical when
    both genes are drivers).
    """
    driver_set = _symbols(drivers)
    essential_set = set(essentials)

    touches_driver = df['GeneA'].isin(driver_set) | df['GeneB'].isin(driver_set)
    has_essential = df['GeneA'].isin(essential_set) | df['GeneB'].isin(essential_set)
    kept = df[touches_driver & ~has_essential].copy()

    logger.info(f"Driver filter: {len(df)} -> {int(touches_driver.sum())} driver-touching; "
                f"{int((touches_driver & has_essential).sum())} removed as core-essential; "
                f"{len(kept)} kept")

    a_driver = kept['GeneA'].isin(driver_set)
    b_driver = kept['GeneB'].isin(driver_set)
    swap = (~a_driver & b_driver) | (a_driver & b_driver & (kept['GeneA'] > kept['GeneB']))
    kept.loc[swap, ['GeneA', 'GeneB']] = kept.loc[swap, ['GeneB', 'GeneA']].values
    return kept


def filter_comutation(df: pd.DataFrame, q_threshold: float) -> pd.DataFrame:
    """Keep co-mutation pairs with q <= q_threshold"""
    if df['q_value'].isna().all():
        logger.warning("Co-mutation table has no q- or p-values; keeping all pairs")
        return df.copy()
    kept = df[df['q_value'] <= q_threshold].copy()
    logger.info(f"Co-mutation significance filter (q <= {q_threshold}): {len(df)} -> {len(kept)}")
    return kept


# ============================================================================
# AGGREGATION
# ============================================================================

def _normalized_scores(df: pd.DataFrame) -> pd.Series:
    """Per-source min-max of |Score| into [0, 1]; missing scores get a fixed fill"""
    magnitude = df['Score'].astype(float).abs()
    grouped = magnitude.groupby(df['source'])
    lo = grouped.transform('min')
    hi = grouped.transform('max')
    span = hi - lo
    norm = (magnitude - lo) / span.where(span > 0)
    # single-valued sources carry full weight
    norm = norm.where(span > 0, 1.0)
    norm[magnitude.isna()] = MISSING_SCORE_FILL
    return norm


def assign_category(composite: float) -> str:
    for name, threshold in CATEGORY_THRESHOLDS:
        if composite >= threshold:
            return name
    return CATEGORY_THRESHOLDS[-1][0]


def _join_unique(sep: str):
    def join(values):
        return sep.join(sorted({str(v) for v in values if pd.notna(v)}))
    return join


def aggregate_interactions(df: pd.DataFrame) -> pd.DataFrame:
    """
    Collapse duplicate gene pairs (in either orientation).

    Composite_Score sums, over distinct sources, the best
    Confidence_Weight * normalized score seen in that source, so a pair
    reported by several independent sources ranks above one repeated
    within a single source.
    """
    if df.empty:
        return pd.DataFrame(columns=AGGREGATED_COLUMNS)

    work = df.copy()
    keys = [pair_key(a, b) for a, b in zip(work['GeneA'], work['GeneB'])]
    work['_k1'] = [k[0] for k in keys]
    work['_k2'] = [k[1] for k in keys]
    work['_weighted'] = work['Confidence_Weight'].astype(float) * _normalized_scores(work)

    per_source = work.groupby(['_k1', '_k2', 'source'])['_weighted'].max()
    composite = per_source.groupby(level=['_k1', '_k2']).sum()

    edges = work.groupby(['_k1', '_k2'], sort=False).agg(
        GeneA=('GeneA', 'first'),
        GeneB=('GeneB', 'first'),
        Count=('source', 'size'),
        N_Sources=('source', 'nunique'),
        Max_Score=('Score', 'max'),
        Evidence=('Evidence', _join_unique('; ')),
        source=('source', _join_unique(',')),
    )
    edges['Composite_Score'] = composite.reindex(edges.index).round(4)
    edges['Category'] = edges['Composite_Score'].map(assign_category)

    edges = (edges.reset_index(drop=True)
             .sort_values(['Composite_Score', 'GeneA', 'GeneB'], ascending=[False, True, True])
             .reset_index(drop=True))
    logger.info(f"Aggregated {len(df)} rows into {len(edges)} unique pairs "
                f"({edges['Category'].value_counts().to_dict()})")
    return edges[AGGREGATED_COLUMNS]


# ============================================================================
# SEQUENCING CO-MUTATION MERGE
# ============================================================================

def comutation_to_interactions(df: pd.DataFrame) -> pd.DataFrame:
    """Map co-mutation rows onto the unified interaction schema"""
    out = pd.DataFrame({
        'GeneA': df['GeneA'],
        'GeneB': df['GeneB'],
        'Score': df['Log2_Odds_Ratio'],
        'Evidence': df['Tendency'].map(_tendency_evidence),
        'Confidence': COMUTATION_CONFIDENCE,
        'Confidence_Weight': CONFIDENCE_WEIGHTS[COMUTATION_CONFIDENCE],
        'source': COMUTATION_SOURCE,
    }, index=df.index)
    return out[UNIFIED_COLUMNS]


def _tendency_evidence(tendency: str) -> str:
    label = TENDENCY_LABELS.get(str(tendency).strip().lower())
    return f"Co-mutation ({label})" if label else "Co-mutation"


def describe_score(row: pd.Series) -> str:
    """Descriptive score label used in the combined table"""
    if row['Interaction_Type'] == COMUTATION_TYPE:
        evidence = str(row.get('Evidence', ''))
        found = [label for label in TENDENCY_LABELS.values() if label in evidence]
        if len(found) > 1:
            return "Co-mutation (mixed)"
        return f"Co-mutation ({found[0]})" if found else "Co-mutation"
    n = int(row.get('N_Sources', 1))
    plural = 'source' if n == 1 else 'sources'
    return f"Synthetic lethal ({row['Category']} evidence, {n} {plural})"


def _label_edges(edges: pd.DataFrame, interaction_type: str) -> pd.DataFrame:
    labelled = edges.copy()
    labelled['Interaction_Type'] = interaction_type
    if interaction_type == COMUTATION_TYPE:
        labelled['Category'] = COMUTATION_TYPE
    labelled['Score'] = labelled.apply(describe_score, axis=1)
    return labelled[COMBINED_COLUMNS]


def combine_networks(sl_edges: pd.DataFrame,
                     comutation_edges: pd.DataFrame = None) -> pd.DataFrame:
    """
    Union of synthetic-lethality and co-mutation edges.

    A pair found in both keeps one row per interaction type.
    """
    parts: List[pd.DataFrame] = []
    if sl_edges is not None and len(sl_edges):
        parts.append(_label_edges(sl_edges, SL_TYPE))
    if comutation_edges is not None and len(comutation_edges):
        parts.append(_label_edges(comutation_edges, COMUTATION_TYPE))
    if not parts:
        return pd.DataFrame(columns=COMBINED_COLUMNS)

    combined = pd.concat(parts, ignore_index=True)
    combined['_key'] = ['|'.join(pair_key(a, b)) for a, b in zip(combined['GeneA'], combined['GeneB'])]
    combined = combined.drop_duplicates(subset=['_key', 'Interaction_Type'])

    types_per_pair = combined.groupby('_key')['Interaction_Type'].nunique()
    both = int((types_per_pair > 1).sum())
    logger.info(f"Combined network: {len(combined)} edges "
                f"({combined['Interaction_Type'].value_counts().to_dict()}), "
                f"{both} pairs supported by both data types")
    return combined.drop(columns='_key').reset_index(drop=True)
