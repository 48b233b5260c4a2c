"""
Tests for evidence unification, filtering and aggregation.
"""

import numpy as np
import pandas as pd
import pytest

from core.data_structures import DriverGene
from pdacnet.config import PipelineConfig
from pdacnet.constants import AGGREGATED_COLUMNS, COMBINED_COLUMNS, UNIFIED_COLUMNS
from pdacnet.evidence import (
    aggregate_interactions, assign_category, combine_networks,
    comutation_to_interactions, filter_comutation, filter_interactions,
    tag_source, unify_sources,
)
from pdacnet.loaders import load_comutation, load_sl_source

DRIVERS = [DriverGene('KRAS'), DriverGene('TP53'), DriverGene('SMAD4'), DriverGene('CDKN2A')]
ESSENTIALS = {'RPL11', 'POLR2A', 'PCNA'}


@pytest.fixture
def unified(data_dir):
    config = PipelineConfig.default(str(data_dir))
    return unify_sources(tag_source(load_sl_source(s), s) for s in config.sl_sources)


@pytest.fixture
def filtered(unified):
    return filter_interactions(unified, DRIVERS, ESSENTIALS)


def _pairs(df):
    return set(zip(df['GeneA'], df['GeneB']))


class TestUnification:

    def test_schema_and_counts(self, unified):
        assert list(unified.columns) == UNIFIED_COLUMNS
        assert unified['source'].value_counts().to_dict() == {
            'synlethdb': 6, 'crispr_screen': 3, 'prediction': 3, 'biogrid': 2,
        }

    def test_confidence_weights(self, unified):
        weights = unified.groupby('source')['Confidence_Weight'].first().to_dict()
        assert weights == {'biogrid': 1.0, 'crispr_screen': 1.0, 'synlethdb': 0.6, 'prediction': 0.3}

    def test_empty(self):
        df = unify_sources([])
        assert df.empty
        assert list(df.columns) == UNIFIED_COLUMNS


class TestDriverEssentialFilter:

    def test_filtered_is_subset_of_unfiltered(self, unified, filtered):
        assert filtered.index.isin(unified.index).all()
        assert len(filtered) <= len(unified)
        for idx, row in filtered.iterrows():
            original = unified.loc[idx]
            assert {row['GeneA'], row['GeneB']} == {original['GeneA'], original['GeneB']}

    def test_every_row_touches_a_driver(self, filtered):
        drivers = {d.symbol for d in DRIVERS}
        assert filtered['GeneA'].isin(drivers).all()

    def test_no_core_essentials(self, filtered):
        assert not filtered['GeneA'].isin(ESSENTIALS).any()
        assert not filtered['GeneB'].isin(ESSENTIALS).any()

    def test_expected_rows(self, filtered):
        assert len(filtered) == 9
        assert ('BRCA1', 'PARP1') not in _pairs(filtered)
        assert ('ARID1A', 'ARID1B') not in _pairs(filtered)

    def test_driver_oriented_as_gene_a(self, filtered):
        # PLK1-TP53 in the screen and STK33-KRAS in SynLethDB are flipped
        assert ('TP53', 'PLK1') in _pairs(filtered)
        assert ('STK33', 'KRAS') not in _pairs(filtered)

    def test_two_drivers_alphabetical(self):
        df = pd.DataFrame({'GeneA': ['TP53'], 'GeneB': ['KRAS'], 'Score': [1.0]})
        out = filter_interactions(df, {'KRAS', 'TP53'}, set())
        assert _pairs(out) == {('KRAS', 'TP53')}

    def test_filters_reduce_monotonically(self, unified):
        no_essential = filter_interactions(unified, DRIVERS, set())
        with_essential = filter_interactions(unified, DRIVERS, ESSENTIALS)
        assert with_essential.index.isin(no_essential.index).all()


class TestAggregation:

    def test_columns_and_unique_pairs(self, filtered):
        edges = aggregate_interactions(filtered)
        assert list(edges.columns) == AGGREGATED_COLUMNS
        assert len(edges) == 5
        keys = {frozenset(p) for p in _pairs(edges)}
        assert len(keys) == len(edges)

    def test_counts_and_sources(self, filtered):
        edges = aggregate_interactions(filtered).set_index(['GeneA', 'GeneB'])
        kras_stk33 = edges.loc[('KRAS', 'STK33')]
        assert kras_stk33['Count'] == 3
        assert kras_stk33['N_Sources'] == 2
        assert kras_stk33['source'] == 'biogrid,synlethdb'

    def test_composite_scores(self, filtered):
        edges = aggregate_interactions(filtered).set_index(['GeneA', 'GeneB'])
        # synlethdb scores 0.5..0.9 -> 0.6 * 1.0; biogrid has no scores -> 1.0 * 0.5
        assert edges.loc[('KRAS', 'STK33'), 'Composite_Score'] == pytest.approx(1.1)
        # synlethdb 0.6 * 0.75 + screen 1.0 * 1.0
        assert edges.loc[('TP53', 'PLK1'), 'Composite_Score'] == pytest.approx(1.45)
        # synlethdb minimum 0.0 + single-valued prediction 0.3 * 1.0
        assert edges.loc[('KRAS', 'GATA2'), 'Composite_Score'] == pytest.approx(0.3)
        assert edges.loc[('SMAD4', 'WEE1'), 'Composite_Score'] == pytest.approx(0.5)

    def test_sorted_descending(self, filtered):
        edges = aggregate_interactions(filtered)
        scores = edges['Composite_Score'].tolist()
        assert scores == sorted(scores, reverse=True)
        assert tuple(edges.iloc[0][['GeneA', 'GeneB']]) == ('TP53', 'PLK1')

    def test_reversed_duplicates_collapse(self):
        df = pd.DataFrame({
            'GeneA': ['KRAS', 'STK33'], 'GeneB': ['STK33', 'KRAS'],
            'Score': [np.nan, np.nan], 'Evidence': ['a', 'b'],
            'Confidence': ['high', 'high'], 'Confidence_Weight': [1.0, 1.0],
            'source': ['s1', 's1'],
        })
        edges = aggregate_interactions(df)
        assert len(edges) == 1
        assert edges.loc[0, 'Count'] == 2
        assert edges.loc[0, 'Evidence'] == 'a; b'
        # one source counts once
        assert edges.loc[0, 'Composite_Score'] == pytest.approx(0.5)

    def test_categories(self):
        assert assign_category(2.0) == 'strong'
        assert assign_category(1.5) == 'strong'
        assert assign_category(0.75) == 'moderate'
        assert assign_category(0.1) == 'weak'

    def test_empty(self):
        edges = aggregate_interactions(pd.DataFrame(columns=UNIFIED_COLUMNS))
        assert edges.empty
        assert list(edges.columns) == AGGREGATED_COLUMNS


class TestCombinedNetwork:

    @pytest.fixture
    def comut_edges(self, data_dir):
        comut = filter_comutation(load_comutation(data_dir / "pdac_comutation.tsv"), 0.05)
        unified = comutation_to_interactions(comut)
        return aggregate_interactions(filter_interactions(unified, DRIVERS, ESSENTIALS))

    def test_comutation_significance_filter(self, data_dir):
        comut = load_comutation(data_dir / "pdac_comutation.tsv")
        kept = filter_comutation(comut, 0.05)
        assert len(kept) == 3
        assert 'TTN' not in set(kept['GeneB'])

    def test_comutation_schema(self, data_dir):
        comut = load_comutation(data_dir / "pdac_comutation.tsv")
        unified = comutation_to_interactions(comut)
        assert list(unified.columns) == UNIFIED_COLUMNS
        assert set(unified['Evidence']) == {'Co-mutation (co-occurring)', 'Co-mutation (mutually exclusive)'}

    def test_combined_table(self, filtered, comut_edges):
        combined = combine_networks(aggregate_interactions(filtered), comut_edges)
        assert list(combined.columns) == COMBINED_COLUMNS
        assert combined['Interaction_Type'].value_counts().to_dict() == {
            'synthetic_lethality': 5, 'co_mutation': 3,
        }
        labels = dict(zip(zip(combined['GeneA'], combined['GeneB']), combined['Score']))
        assert labels[('KRAS', 'STK33')] == 'Synthetic lethal (moderate evidence, 2 sources)'
        assert labels[('SMAD4', 'WEE1')] == 'Synthetic lethal (weak evidence, 1 source)'
        assert labels[('SMAD4', 'RNF43')] == 'Co-mutation (mutually exclusive)'
        assert labels[('KRAS', 'TP53')] == 'Co-mutation (co-occurring)'
        assert combined['Score'].map(type).eq(str).all()

    def test_pair_in_both_keeps_one_row_per_type(self):
        sl = pd.DataFrame([{
            'GeneA': 'KRAS', 'GeneB': 'TP53', 'Count': 1, 'N_Sources': 1, 'Composite_Score': 1.0,
            'Max_Score': 1.0, 'Evidence': 'x', 'source': 's', 'Category': 'moderate',
        }])
        comut = sl.assign(GeneA='TP53', GeneB='KRAS', Evidence='Co-mutation (co-occurring)',
                          source='comutation')
        combined = combine_networks(sl, pd.concat([comut, comut], ignore_index=True))
        assert len(combined) == 2
        assert set(combined['Interaction_Type']) == {'synthetic_lethality', 'co_mutation'}

    def test_no_comutation(self, filtered):
        combined = combine_networks(aggregate_interactions(filtered), None)
        assert set(combined['Interaction_Type']) == {'synthetic_lethality'}

    def test_mixed_tendency_label(self):
        comut = pd.DataFrame([{
            'GeneA': 'KRAS', 'GeneB': 'TP53', 'Count': 2, 'N_Sources': 1, 'Composite_Score': 0.6,
            'Max_Score': 1.2, 'Evidence': 'Co-mutation (co-occurring); Co-mutation (mutually exclusive)',
            'source': 'comutation', 'Category': 'weak',
        }])
        combined = combine_networks(None, comut)
        assert combined.loc[0, 'Score'] == 'Co-mutation (mixed)'
