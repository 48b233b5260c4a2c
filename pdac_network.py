#!/usr/bin/env python3
"""
PDAC Candidate Interaction Network
==================================
Builds a candidate gene-interaction network for pancreatic ductal
adenocarcinoma from public synthetic-lethality and co-mutation data.

Pipeline:
1. Load four synthetic-lethality sources, the driver list and the
   core-essential blacklist
2. Tag each source with its experimental confidence and unify
3. Keep driver-touching interactions, drop core-essential genes
4. Collapse duplicate pairs into a composite score
5. Build and render the graph (driver vs. partner)
6. Repeat 1-5 for the co-mutation table and merge into one combined table
7. Annotate partner genes with their best DGIdb drug and export

Usage:
    python run_pipeline.py --data-dir data/ --output results/
"""

import json
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from core.data_structures import PipelineResult
from pdacnet.config import PipelineConfig
from pdacnet.drug_annotation import DGIdbClient, annotate_partners
from pdacnet.evidence import (
    aggregate_interactions, combine_networks, comutation_to_interactions,
    filter_comutation, filter_interactions, tag_source, unify_sources,
)
from pdacnet.graph import (
    add_drug_nodes, build_graph, edges_to_frame, network_summary,
    partner_genes, render_layouts,
)
from pdacnet.loaders import (
    load_comutation, load_core_essentials, load_driver_genes, load_sl_source,
)

logger = logging.getLogger(__name__)


def _progress(msg: str, step: str = "") -> None:
    """Print progress message so user always sees what's happening (flush immediately)."""
    if step:
        print(f"    -> {msg} [{step}]", flush=True)
    else:
        print(f"    -> {msg}...", flush=True)


class PDACNetworkPipeline:
    """Runs every stage for one configuration"""

    def __init__(self, config: PipelineConfig, figures_dir: Optional[str] = None,
                 client: Optional[DGIdbClient] = None):
        self.config = config
        self.figures_dir = Path(figures_dir) if figures_dir else None
        self._client = client

    @property
    def client(self) -> DGIdbClient:
        if self._client is None:
            cache_dir = str(self.config.cache_dir) if self.config.cache_dir else None
            self._client = DGIdbClient(base_url=self.config.dgidb_url, cache_dir=cache_dir)
        return self._client

    def load_synthetic_lethality(self) -> pd.DataFrame:
        frames = []
        for spec in self.config.sl_sources:
            _progress(f"Loading {spec.source_id}", spec.path.name)
            frames.append(tag_source(load_sl_source(spec), spec))
        return unify_sources(frames)

    def load_comutation_edges(self, drivers, essentials):
        """Filtered co-mutation rows and their aggregated edges, or (None, None)"""
        path = self.config.comutation_file
        if path is None:
            return None, None
        if not Path(path).exists():
            logger.warning(f"Co-mutation table not found at {path}; skipping co-mutation stage")
            return None, None

        _progress("Loading co-mutation table", Path(path).name)
        comut = load_comutation(path)
        significant = filter_comutation(comut, self.config.comutation_q_threshold)
        unified = comutation_to_interactions(significant)
        filtered = filter_interactions(unified, drivers, essentials)
        return filtered, aggregate_interactions(filtered)

    def run(self) -> PipelineResult:
        cfg = self.config
        logger.info("=" * 60)
        logger.info("PDAC interaction network")
        logger.info("=" * 60)

        _progress("Loading driver and core-essential genes")
        drivers = load_driver_genes(cfg.driver_file, cfg.driver_q_threshold)
        essentials = load_core_essentials(cfg.essential_file)
        overlap = {d.symbol for d in drivers} & essentials
        if overlap:
            logger.warning(f"{len(overlap)} driver genes are core-essential and will be removed: "
                           f"{sorted(overlap)}")

        unified = self.load_synthetic_lethality()
        _progress("Filtering against drivers and core essentials")
        sl_filtered = filter_interactions(unified, drivers, essentials)
        sl_edges = aggregate_interactions(sl_filtered)

        result = PipelineResult(
            drivers=drivers,
            essentials=essentials,
            sl_unified=unified,
            sl_filtered=sl_filtered,
            sl_edges=sl_edges,
        )
        result.stage_counts.update({
            'sl_unified': len(unified),
            'sl_filtered': len(sl_filtered),
            'sl_edges': len(sl_edges),
        })

        comut_filtered, comut_edges = self.load_comutation_edges(drivers, essentials)
        result.comutation_filtered = comut_filtered
        result.comutation_edges = comut_edges
        if comut_edges is not None:
            result.stage_counts.update({
                'comutation_filtered': len(comut_filtered),
                'comutation_edges': len(comut_edges),
            })

        _progress("Merging synthetic-lethality and co-mutation networks")
        result.combined = combine_networks(sl_edges, comut_edges)
        result.stage_counts['combined'] = len(result.combined)

        G = build_graph(result.combined, drivers)
        if self.figures_dir is not None and cfg.render_figures:
            _progress("Rendering networks", str(self.figures_dir))
            result.figures += [str(p) for p in render_layouts(build_graph(sl_edges, drivers),
                                                                self.figures_dir, 'sl_network')]
            result.figures += [str(p) for p in render_layouts(G, self.figures_dir, 'combined_network')]

        if cfg.annotate_drugs:
            partners = partner_genes(G)
            _progress(f"Querying DGIdb for {len(partners)} partner genes")
            result.drug_targets = annotate_partners(partners, self.client)
            add_drug_nodes(G, result.drug_targets)
            if self.figures_dir is not None and cfg.render_figures:
                result.figures += [str(p) for p in render_layouts(G, self.figures_dir, 'drug_network')]

        result.graph = G
        result.summary = network_summary(G)
        logger.info(f"Stage row counts: {result.stage_counts}")
        return result


def export_results(result: PipelineResult, out_dir) -> dict:
    """Write CSV/JSON artifacts; returns {artifact name: path}"""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written = {}

    def _write(name: str, df: Optional[pd.DataFrame]):
        if df is None:
            return
        path = out_dir / name
        df.to_csv(path, index=False)
        written[name] = path
        logger.info(f"Wrote {len(df)} rows to {path}")

    _write('sl_interactions_filtered.csv', result.sl_edges)
    _write('comutation_interactions_filtered.csv', result.comutation_edges)
    _write('combined_interactions.csv', result.combined)

    G = result.graph
    partners = partner_genes(G) if G is not None else []
    drugs_by_gene = {}
    if result.drug_targets is not None:
        drugs_by_gene = dict(zip(result.drug_targets['Gene'], result.drug_targets['Drug']))
    partner_rows = [{
        'Gene': g,
        'Degree': G.degree(g),
        'Drivers': ','.join(sorted(n for n in G.neighbors(g) if G.nodes[n].get('role') == 'driver')),
        'Best_Drug': drugs_by_gene.get(g, ''),
    } for g in partners]
    _write('partner_genes.csv', pd.DataFrame(partner_rows, columns=['Gene', 'Degree', 'Drivers', 'Best_Drug']))
    _write('drug_targets.csv', result.drug_targets)
    if G is not None:
        _write('final_network_edges.csv', edges_to_frame(G))

    if result.summary is not None:
        path = out_dir / 'network_summary.json'
        summary = result.summary.to_dict()
        summary['stage_counts'] = result.stage_counts
        summary['figures'] = result.figures
        path.write_text(json.dumps(summary, indent=2))
        written['network_summary.json'] = path

    return written
