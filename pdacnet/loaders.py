#!/usr/bin/env python3
"""
Flat-file dataset loaders
=========================
Readers for the synthetic-lethality sources, the driver-gene list, the
core-essential blacklist and the co-mutation table.

Every loader returns canonical column names so downstream stages never
see source-specific headers.
"""

import logging
from pathlib import Path
from typing import List, Optional, Set

import numpy as np
import pandas as pd

from core.data_structures import DriverGene
from core.statistics import apply_fdr_correction
from pdacnet.config import SourceSpec
from pdacnet.constants import COLUMN_ALIASES, DRIVER_Q_THRESHOLD
from pdacnet.utils import normalize_symbol

logger = logging.getLogger(__name__)

_SUFFIX_FORMATS = {
    '.csv': 'csv',
    '.tsv': 'tsv',
    '.txt': 'tsv',
    '.tab': 'tsv',
    '.xlsx': 'excel',
    '.xls': 'excel',
}


def read_table(path, fmt: Optional[str] = None, sheet=None) -> pd.DataFrame:
    """
    Read a csv / tab-delimited / Excel table.

    Raises:
        FileNotFoundError: path does not exist
        ValueError: format cannot be determined or is unsupported
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input table not found: {path}")

    fmt = fmt or _SUFFIX_FORMATS.get(path.suffix.lower())
    if fmt == 'csv':
        df = pd.read_csv(path, low_memory=False)
    elif fmt == 'tsv':
        df = pd.read_csv(path, sep='\t', low_memory=False)
    elif fmt == 'excel':
        df = pd.read_excel(path, sheet_name=sheet if sheet is not None else 0)
    else:
        raise ValueError(f"Unsupported table format for {path}: {fmt!r}")

    logger.info(f"Read {len(df)} rows from {path.name}")
    return df


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Strip header whitespace and map known aliases onto canonical names"""
    renamed = {}
    for col in df.columns:
        stripped = str(col).strip()
        renamed[col] = COLUMN_ALIASES.get(stripped.lower(), stripped)
    return df.rename(columns=renamed)


def _clean_pairs(df: pd.DataFrame, label: str) -> pd.DataFrame:
    """Normalize GeneA/GeneB, drop missing symbols and self-pairs"""
    df = df.copy()
    df['GeneA'] = df['GeneA'].map(normalize_symbol)
    df['GeneB'] = df['GeneB'].map(normalize_symbol)
    n_before = len(df)
    df = df.dropna(subset=['GeneA', 'GeneB'])
    df = df[df['GeneA'] != df['GeneB']]
    dropped = n_before - len(df)
    if dropped:
        logger.debug(f"{label}: dropped {dropped} rows with missing symbols or self-pairs")
    return df


def load_sl_source(spec: SourceSpec) -> pd.DataFrame:
    """
    Load one synthetic-lethality source into GeneA/GeneB/Score/Evidence.

    The source's ``row_filter`` is applied on raw columns before renaming.
    Non-numeric scores (e.g. BioGRID's '-') become NaN.
    """
    raw = read_table(spec.path, spec.fmt, spec.sheet)
    raw.columns = [str(c).strip() for c in raw.columns]

    missing = [c for c in list(spec.columns) + list(spec.row_filter) if c not in raw.columns]
    if missing:
        raise ValueError(f"Source {spec.source_id} ({spec.path.name}) is missing columns {missing}")

    for col, allowed in spec.row_filter.items():
        raw = raw[raw[col].isin(allowed)]

    df = raw[list(spec.columns)].rename(columns=spec.columns).copy()
    if 'Score' not in df.columns:
        df['Score'] = np.nan
    df['Score'] = pd.to_numeric(df['Score'], errors='coerce')
    if 'Evidence' in df.columns:
        df['Evidence'] = df['Evidence'].fillna(spec.evidence).astype(str)
    else:
        df['Evidence'] = spec.evidence

    df = _clean_pairs(df, spec.source_id)
    logger.info(f"Loaded {len(df)} interactions from {spec.source_id}")
    return df[['GeneA', 'GeneB', 'Score', 'Evidence']].reset_index(drop=True)


def _uncensor(values: pd.Series) -> pd.Series:
    """Numeric values from cBioPortal-style censored strings ('<0.001', '>3')"""
    return pd.to_numeric(values.astype(str).str.strip().str.lstrip('<>'), errors='coerce')


def _fill_q_values(df: pd.DataFrame, label: str) -> pd.DataFrame:
    """Compute BH q-values from p-values when a table ships none"""
    if 'p_value' in df.columns:
        df['p_value'] = _uncensor(df['p_value'])
    if 'q_value' in df.columns:
        df['q_value'] = _uncensor(df['q_value'])
        if df['q_value'].notna().any():
            return df
    if 'p_value' not in df.columns:
        df['q_value'] = np.nan
        return df
    adjusted, _ = apply_fdr_correction(df['p_value'].tolist())
    df['q_value'] = adjusted
    logger.info(f"{label}: computed Benjamini-Hochberg q-values for {df['p_value'].notna().sum()} rows")
    return df


def load_driver_genes(path, q_threshold: Optional[float] = DRIVER_Q_THRESHOLD,
                      fmt: Optional[str] = None) -> List[DriverGene]:
    """
    Load the driver-gene list.

    Genes with a q-value above ``q_threshold`` are dropped; genes without
    any significance value are kept. Pass ``q_threshold=None`` to keep all.
    """
    df = normalize_columns(read_table(path, fmt))
    if 'Symbol' not in df.columns:
        raise ValueError(f"Driver file {path} has no gene symbol column (columns: {list(df.columns)})")

    df = _fill_q_values(df, 'drivers')
    df['Symbol'] = df['Symbol'].map(normalize_symbol)
    df = df.dropna(subset=['Symbol'])

    if q_threshold is not None:
        keep = df['q_value'].isna() | (df['q_value'] <= q_threshold)
        n_dropped = int((~keep).sum())
        df = df[keep]
        if n_dropped:
            logger.info(f"Dropped {n_dropped} drivers with q > {q_threshold}")

    drivers = []
    seen: Set[str] = set()
    for _, row in df.iterrows():
        if row['Symbol'] in seen:
            continue
        seen.add(row['Symbol'])
        drivers.append(DriverGene(
            symbol=row['Symbol'],
            p_value=_optional_float(row.get('p_value')),
            q_value=_optional_float(row.get('q_value')),
        ))
    logger.info(f"Loaded {len(drivers)} driver genes")
    return drivers


def _optional_float(value) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(value)


def load_core_essentials(path, fmt: Optional[str] = None) -> Set[str]:
    """
    Load the core-essential blacklist.

    Accepts a table with a symbol column (GENE / Symbol / Essentials) or a
    headerless one-gene-per-line file.
    """
    df = normalize_columns(read_table(path, fmt))
    if 'Symbol' in df.columns:
        values = df['Symbol']
    else:
        # headerless list: the first "header" is itself a gene
        values = pd.concat([pd.Series([df.columns[0]]), df.iloc[:, 0]], ignore_index=True)
    essentials = {s for s in values.map(normalize_symbol) if s}
    logger.info(f"Loaded {len(essentials)} core-essential genes")
    return essentials


def load_comutation(path, fmt: Optional[str] = None) -> pd.DataFrame:
    """
    Load a cBioPortal-style mutual exclusivity / co-occurrence export.

    Returns columns GeneA, GeneB, Log2_Odds_Ratio, p_value, q_value, Tendency.
    """
    df = normalize_columns(read_table(path, fmt))
    required = ['GeneA', 'GeneB', 'Log2_Odds_Ratio', 'Tendency']
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"Co-mutation table {path} is missing columns {missing}")

    df['Log2_Odds_Ratio'] = _uncensor(df['Log2_Odds_Ratio'])
    df = _fill_q_values(df, 'co-mutation')
    if 'p_value' not in df.columns:
        df['p_value'] = np.nan
    df['Tendency'] = df['Tendency'].astype(str).str.strip()
    df = _clean_pairs(df, 'co-mutation')

    logger.info(f"Loaded {len(df)} co-mutation pairs")
    return df[['GeneA', 'GeneB', 'Log2_Odds_Ratio', 'p_value', 'q_value', 'Tendency']].reset_index(drop=True)
