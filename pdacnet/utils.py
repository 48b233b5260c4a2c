#!/usr/bin/env python3
"""
Shared utilities for the PDAC interaction network.
Keeps common logic DRY across modules.
"""

import re
from typing import Optional, Tuple

import pandas as pd

_ENTREZ_SUFFIX = re.compile(r'\s*\(\d+\)\s*$')


def sanitize_name(name: str, max_len: Optional[int] = None) -> str:
    """
    Sanitize a label for safe use in filenames.
    Replaces non-word chars (except hyphen) with underscore.
    """
    safe = re.sub(r'[^\w\-]', '_', name)
    if max_len is not None:
        safe = safe[:max_len]
    return safe


def normalize_symbol(value) -> Optional[str]:
    """
    Normalize a gene symbol: strip, upper-case, drop a DepMap-style
    " (ENTREZ)" suffix. Returns None for empty, NaN and '-' placeholders.
    """
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    symbol = _ENTREZ_SUFFIX.sub('', str(value)).strip().upper()
    if not symbol or symbol in ('-', 'NAN', 'NONE'):
        return None
    return symbol


def pair_key(gene_a: str, gene_b: str) -> Tuple[str, str]:
    """Order-independent key for an undirected gene pair"""
    return (gene_a, gene_b) if gene_a <= gene_b else (gene_b, gene_a)
