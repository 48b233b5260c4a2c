#!/usr/bin/env python3
"""
DGIdb Drug Annotation
=====================
Looks up known drug-gene interactions for partner genes and keeps the
best-supported drug per gene.

Features:
- One GET per gene against the DGIdb interactions endpoint
- Single retry with DGIdb's suggested spelling when a symbol is unmatched
- Disk cache of raw responses
- Best drug = most supporting publications, then interaction score
"""

import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd
import requests
from tqdm import tqdm

from core.data_structures import DrugGeneInteraction
from pdacnet.constants import (
    CACHE_MAX_AGE_SECONDS, DGIDB_BASE_URL, DGIDB_RATE_LIMIT_DELAY, DGIDB_TIMEOUT,
)

logger = logging.getLogger(__name__)

DRUG_TABLE_COLUMNS = ['Gene', 'Drug', 'Literature_Count', 'Interaction_Score',
                      'Interaction_Types', 'Queried_As']

# ============================================================================
# CACHING UTILITY
# ============================================================================

class APICache:
    """Simple disk-based cache for API responses"""

    def __init__(self, cache_dir: str = "./api_cache", max_age: float = CACHE_MAX_AGE_SECONDS):
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(exist_ok=True, parents=True)
        self.max_age = max_age

    def _get_cache_key(self, prefix: str, params: dict) -> str:
        """Generate cache key from parameters"""
        param_str = json.dumps(params, sort_keys=True)
        hash_val = hashlib.md5(param_str.encode()).hexdigest()[:12]
        return f"{prefix}_{hash_val}"

    def get(self, prefix: str, params: dict) -> Optional[dict]:
        """Get cached result if exists and not expired"""
        cache_file = self.cache_dir / f"{self._get_cache_key(prefix, params)}.json"
        if not cache_file.exists():
            return None
        try:
            data = json.loads(cache_file.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.debug(f"Ignoring unreadable cache file {cache_file}: {e}")
            return None
        if time.time() - data.get('_cached_at', 0) < self.max_age:
            return data.get('result')
        return None

    def set(self, prefix: str, params: dict, result: dict):
        """Cache result"""
        cache_file = self.cache_dir / f"{self._get_cache_key(prefix, params)}.json"
        cache_file.write_text(json.dumps({'_cached_at': time.time(), 'result': result}))


# ============================================================================
# DGIdb CLIENT
# ============================================================================

class DGIdbClient:
    """
    Client for the DGIdb interactions endpoint.

    Response layout (per searched term):
        matchedTerms:   [{searchTerm, geneName, interactions: [{drugName, pmids, score, ...}]}]
        ambiguousTerms: same shape, several genes per term
        unmatchedTerms: [{searchTerm, suggestions: [...]}]
    """

    def __init__(self, base_url: str = DGIDB_BASE_URL, cache_dir: Optional[str] = "./api_cache",
                 timeout: float = DGIDB_TIMEOUT, rate_limit_delay: float = DGIDB_RATE_LIMIT_DELAY,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.cache = APICache(cache_dir) if cache_dir else None
        self.timeout = timeout
        self._rate_limit_delay = rate_limit_delay
        self.session = session or requests.Session()
        self.unmatched: List[str] = []

    def _fetch(self, gene: str) -> Optional[dict]:
        """Raw JSON for one gene; None on HTTP or decoding failure"""
        params = {'genes': gene}
        if self.cache:
            cached = self.cache.get('dgidb_interactions', params)
            if cached is not None:
                return cached

        try:
            response = self.session.get(f"{self.base_url}/interactions.json",
                                        params=params, timeout=self.timeout)
            time.sleep(self._rate_limit_delay)
            if response.status_code != 200:
                logger.warning(f"DGIdb request failed for {gene}: HTTP {response.status_code}")
                return None
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"DGIdb request error for {gene}: {e}")
            return None

        if self.cache:
            self.cache.set('dgidb_interactions', params, data)
        return data

    @staticmethod
    def _matched_term(data: dict, gene: str) -> Optional[dict]:
        for term in data.get('matchedTerms') or []:
            if str(term.get('searchTerm', '')).upper() == gene.upper():
                return term
        for term in data.get('ambiguousTerms') or []:
            if str(term.get('geneName', '')).upper() == gene.upper():
                return term
        return None

    @staticmethod
    def _suggestion(data: dict, gene: str) -> Optional[str]:
        for term in data.get('unmatchedTerms') or []:
            if str(term.get('searchTerm', '')).upper() != gene.upper():
                continue
            suggestions = term.get('suggestions') or []
            if suggestions:
                return str(suggestions[0])
        return None

    @staticmethod
    def parse_interactions(term: dict, gene: str, queried_as: str) -> List[DrugGeneInteraction]:
        """Convert one matched term into DrugGeneInteraction records"""
        hits = []
        for item in term.get('interactions') or []:
            drug = item.get('drugName')
            if not drug:
                continue
            hits.append(DrugGeneInteraction(
                gene=gene,
                drug=str(drug),
                literature_count=len(item.get('pmids') or []),
                interaction_score=float(item.get('score') or 0.0),
                interaction_types=[str(t) for t in item.get('interactionTypes') or []],
                sources=[str(s) for s in item.get('sources') or []],
                queried_as=queried_as,
            ))
        return hits

    def lookup(self, gene: str) -> Optional[List[DrugGeneInteraction]]:
        """
        All drug interactions for ``gene``.

        Returns None when the gene cannot be matched, even after trying
        DGIdb's first suggested spelling once.
        """
        data = self._fetch(gene)
        if data is None:
            return None

        term = self._matched_term(data, gene)
        if term is not None:
            return self.parse_interactions(term, gene, gene)

        suggestion = self._suggestion(data, gene)
        if suggestion and suggestion.upper() != gene.upper():
            logger.info(f"{gene} not found in DGIdb; trying suggested symbol {suggestion}")
            retry = self._fetch(suggestion)
            if retry is not None:
                term = self._matched_term(retry, suggestion)
                if term is not None:
                    return self.parse_interactions(term, gene, suggestion)

        logger.warning(f"Could not find {gene} in DGIdb")
        self.unmatched.append(gene)
        return None


# ============================================================================
# BEST-DRUG SELECTION
# ============================================================================

def best_drug(interactions: Iterable[DrugGeneInteraction]) -> Optional[DrugGeneInteraction]:
    """Drug with the most literature support; ties by score, then name"""
    interactions = list(interactions)
    if not interactions:
        return None
    return min(interactions, key=DrugGeneInteraction.rank_key)


def annotate_partners(genes: Iterable[str], client: DGIdbClient,
                      show_progress: bool = True) -> pd.DataFrame:
    """
    Best drug per gene, one row per gene with at least one interaction.
    """
    genes = sorted(set(genes))
    rows: List[Dict] = []
    no_drugs = 0
    for gene in tqdm(genes, desc="DGIdb lookup", disable=not show_progress):
        interactions = client.lookup(gene)
        if interactions is None:
            continue
        pick = best_drug(interactions)
        if pick is None:
            no_drugs += 1
            logger.debug(f"No drug interactions listed for {gene}")
            continue
        rows.append(pick.to_row())

    logger.info(f"Annotated {len(rows)}/{len(genes)} partner genes with drugs "
                f"({len(client.unmatched)} unmatched, {no_drugs} without interactions)")
    return pd.DataFrame(rows, columns=DRUG_TABLE_COLUMNS)
