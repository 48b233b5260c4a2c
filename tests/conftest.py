"""
Shared fixtures: a miniature copy of every input file in the default layout.

Drivers (q <= 0.1): KRAS, TP53, SMAD4, CDKN2A   (ARID1A has q = 0.5)
Core essentials:    RPL11, POLR2A, PCNA
"""

from unittest.mock import MagicMock

import pandas as pd
import pytest


@pytest.fixture
def data_dir(tmp_path):
    """Write the default input layout into a temp directory"""
    d = tmp_path / "data"
    d.mkdir()

    pd.DataFrame({
        'SYMBOL': ['KRAS', 'TP53', 'SMAD4', 'CDKN2A', 'ARID1A'],
        'PVALUE_COMBINATION': [1e-6, 1e-5, 1e-4, 1e-3, 0.2],
        'QVALUE_COMBINATION': [0.001, 0.002, 0.01, 0.02, 0.5],
    }).to_csv(d / "pdac_driver_genes.tsv", sep='\t', index=False)

    pd.DataFrame({'GENE': ['RPL11', 'POLR2A', 'PCNA']}).to_csv(
        d / "core_essential_genes.tsv", sep='\t', index=False)

    pd.DataFrame({
        'n1.name': ['KRAS', 'KRAS', 'TP53', 'BRCA1', 'KRAS', 'STK33'],
        'n2.name': ['STK33', 'GATA2', 'PLK1', 'PARP1', 'RPL11', 'KRAS'],
        'r.statistic_score': [0.9, 0.5, 0.8, 0.95, 0.7, 0.6],
        'r.methods': ['RNAi Screen', 'RNAi Screen', 'Computational', 'Low-throughput',
                      'CRISPR/CRISPRi', 'Text Mining'],
    }).to_csv(d / "Human_SL.csv", index=False)

    pd.DataFrame({
        'Official Symbol Interactor A': ['KRAS', 'SMAD4', 'TP53', 'KRAS'],
        'Official Symbol Interactor B': ['STK33', 'WEE1', 'MDM2', 'KRAS'],
        'Experimental System': ['Synthetic Lethality', 'Synthetic Lethality',
                                'Synthetic Growth Defect', 'Synthetic Lethality'],
        'Score': ['-', '-', '-', '-'],
    }).to_csv(d / "BIOGRID-SL.tab3.txt", sep='\t', index=False)

    pd.DataFrame({
        'Gene1': ['PLK1', 'CDKN2A', 'PCNA'],
        'Gene2': ['TP53', 'PRMT5', 'SMAD4'],
        'GI score': [-2.5, -1.8, -3.0],
    }).to_excel(d / "crispr_double_knockout.xlsx", index=False)

    pd.DataFrame({
        'gene1': ['KRAS', 'ARID1A', 'MYC'],
        'gene2': ['GATA2', 'ARID1B', 'CDK9'],
        'score': [0.4, 0.9, 0.7],
    }).to_csv(d / "predicted_sl_pairs.tsv", sep='\t', index=False)

    pd.DataFrame({
        'A': ['KRAS', 'KRAS', 'SMAD4', 'TP53'],
        'B': ['TP53', 'GNAS', 'RNF43', 'TTN'],
        'Neither': [100, 120, 110, 90],
        'A Not B': [20, 30, 25, 10],
        'B Not A': [5, 2, 8, 30],
        'Both': [60, 10, 1, 4],
        'Log2 Odds Ratio': ['1.2', '>3', '-1.5', '0.2'],
        'p-Value': ['<0.001', '0.01', '0.02', '0.5'],
        'q-Value': ['<0.001', '0.03', '0.04', '0.6'],
        'Tendency': ['Co-occurrence', 'Co-occurrence', 'Mutual exclusivity', 'Co-occurrence'],
    }).to_csv(d / "pdac_comutation.tsv", sep='\t', index=False)

    return d


def dgidb_payload(gene, interactions=None, suggestions=None):
    """Build a DGIdb interactions.json body for one search term"""
    if interactions is None:
        return {
            'matchedTerms': [],
            'ambiguousTerms': [],
            'unmatchedTerms': [{'searchTerm': gene, 'suggestions': suggestions or []}],
        }
    return {
        'matchedTerms': [{
            'searchTerm': gene,
            'geneName': gene,
            'interactions': [
                {'drugName': name, 'pmids': list(range(n_pmids)), 'score': score,
                 'interactionTypes': ['inhibitor'], 'sources': ['ChEMBL']}
                for name, n_pmids, score in interactions
            ],
        }],
        'ambiguousTerms': [],
        'unmatchedTerms': [],
    }


def make_session(payloads, status_code=200):
    """Mock requests.Session whose get() answers from {gene: payload}"""
    session = MagicMock()

    def get(url, params=None, timeout=None):
        gene = params['genes']
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = payloads.get(gene, dgidb_payload(gene))
        return response

    session.get.side_effect = get
    return session


@pytest.fixture
def dgidb_payloads():
    return {
        'PLK1': dgidb_payload('PLK1', [('VOLASERTIB', 3, 2.0), ('RIGOSERTIB', 3, 5.0), ('BI-2536', 1, 9.0)]),
        'WEE1': dgidb_payload('WEE1', [('ADAVOSERTIB', 5, 1.0)]),
        'PRMT5': dgidb_payload('PRMT5', []),
        'HER2': dgidb_payload('HER2', suggestions=['ERBB2']),
        'ERBB2': dgidb_payload('ERBB2', [('TRASTUZUMAB', 12, 3.0), ('LAPATINIB', 8, 4.0)]),
    }


@pytest.fixture
def payload_builder():
    return dgidb_payload


@pytest.fixture
def session_factory():
    return make_session
