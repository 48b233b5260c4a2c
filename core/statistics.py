"""
Statistical Methods for the PDAC Interaction Network
====================================================
Multiple-testing correction for driver-gene and co-mutation tables that
ship raw p-values only.
"""

from typing import List, Sequence, Tuple

import numpy as np
from statsmodels.stats.multitest import multipletests


def apply_fdr_correction(p_values: Sequence[float],
                         method: str = 'fdr_bh',
                         alpha: float = 0.05) -> Tuple[List[float], List[bool]]:
    """
    Apply False Discovery Rate (FDR) correction for multiple hypothesis testing.

    Missing p-values are passed through as NaN and never rejected; the
    correction is computed over the observed values only.

    Args:
        p_values: Raw p-values
        method: Correction method ('fdr_bh' for Benjamini-Hochberg,
                'bonferroni', 'holm', 'fdr_by')
        alpha: Significance level (default 0.05)

    Returns:
        Tuple of (adjusted_pvalues, reject_null_hypothesis)

    Example:
        >>> adj_p, significant = apply_fdr_correction([0.001, 0.01, 0.04, 0.5])
    """
    p = np.asarray(p_values, dtype=float)
    if p.size == 0:
        return [], []

    adjusted = np.full(p.shape, np.nan)
    reject = np.zeros(p.shape, dtype=bool)
    observed = ~np.isnan(p)
    if observed.any():
        rej, corrected, _, _ = multipletests(p[observed], alpha=alpha, method=method)
        adjusted[observed] = corrected
        reject[observed] = rej
    return adjusted.tolist(), [bool(r) for r in reject]
