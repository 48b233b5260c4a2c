#!/usr/bin/env python3
"""Generate summary figures from exported PDAC network results."""

import argparse
import logging
import os

import pandas as pd
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import networkx as nx

from pdacnet.constants import EDGE_COLORS, ROLE_COLORS
from pdacnet.graph import render_layouts

logger = logging.getLogger(__name__)

# ── Style ────────────────────────────────────────────────────────────────────
plt.rcParams.update({
    'font.family': 'sans-serif',
    'font.sans-serif': ['Arial', 'Helvetica', 'DejaVu Sans'],
    'font.size': 9,
    'axes.titlesize': 10,
    'axes.labelsize': 9,
    'xtick.labelsize': 7.5,
    'ytick.labelsize': 7.5,
    'legend.fontsize': 7.5,
    'figure.dpi': 300,
    'savefig.dpi': 300,
    'savefig.bbox': 'tight',
    'axes.spines.top': False,
    'axes.spines.right': False,
})


def graph_from_edges(edges: pd.DataFrame) -> nx.Graph:
    """Rebuild the final graph from final_network_edges.csv"""
    G = nx.Graph()
    for _, row in edges.iterrows():
        for node, role in ((row['Source'], row['Source_Role']), (row['Target'], row['Target_Role'])):
            if node not in G:
                G.add_node(node, role=role, color=ROLE_COLORS.get(role, '#999999'))
        G.add_edge(row['Source'], row['Target'], category=row['Category'],
                   weight=float(row['Weight']) if pd.notna(row['Weight']) else 0.0,
                   interaction_type=row['Interaction_Type'],
                   color=EDGE_COLORS.get(row['Category'], '#999999'))
    return G


# ═══════════════════════════════════════════════════════════════════════════════
# Evidence per source
# ═══════════════════════════════════════════════════════════════════════════════
def fig_source_support(combined: pd.DataFrame, out_dir: str) -> str:
    """Stacked bar: edges per source, split by category"""
    rows = []
    for _, row in combined.iterrows():
        for src in str(row['source']).split(','):
            rows.append({'source': src, 'Category': row['Category']})
    counts = pd.DataFrame(rows, columns=['source', 'Category'])
    table = counts.groupby(['source', 'Category']).size().unstack(fill_value=0)

    fig, ax = plt.subplots(figsize=(4.5, 3))
    bottom = None
    for cat in [c for c in EDGE_COLORS if c in table.columns]:
        ax.bar(table.index, table[cat], bottom=bottom, color=EDGE_COLORS[cat],
               label=cat.replace('_', ' '), edgecolor='white')
        bottom = table[cat] if bottom is None else bottom + table[cat]
    ax.set_ylabel('Edges after filtering')
    ax.set_title('Interaction support by source')
    ax.legend(frameon=False)
    plt.setp(ax.get_xticklabels(), rotation=30, ha='right')

    path = os.path.join(out_dir, 'source_support.png')
    fig.savefig(path)
    plt.close(fig)
    return path


# ═══════════════════════════════════════════════════════════════════════════════
# Composite score distribution
# ═══════════════════════════════════════════════════════════════════════════════
def fig_composite_distribution(sl_edges: pd.DataFrame, out_dir: str) -> str:
    fig, ax = plt.subplots(figsize=(4, 3))
    ax.hist(sl_edges['Composite_Score'].astype(float), bins=20, color='#1f77b4', edgecolor='white')
    ax.set_xlabel('Composite score')
    ax.set_ylabel('Gene pairs')
    ax.set_title('Synthetic-lethality composite scores')
    path = os.path.join(out_dir, 'composite_scores.png')
    fig.savefig(path)
    plt.close(fig)
    return path


def main(argv=None):
    parser = argparse.ArgumentParser(description='Render figures from pipeline results')
    parser.add_argument('--results', default='results')
    parser.add_argument('--out', default='figures')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(levelname)s:%(name)s:%(message)s')
    os.makedirs(args.out, exist_ok=True)

    combined = pd.read_csv(os.path.join(args.results, 'combined_interactions.csv'))
    sl_edges = pd.read_csv(os.path.join(args.results, 'sl_interactions_filtered.csv'))
    edges = pd.read_csv(os.path.join(args.results, 'final_network_edges.csv'))

    paths = [fig_source_support(combined, args.out)]
    if len(sl_edges):
        paths.append(fig_composite_distribution(sl_edges, args.out))
    paths += [str(p) for p in render_layouts(graph_from_edges(edges), args.out, 'final_network')]
    for p in paths:
        print(f"Saved {p}")


if __name__ == '__main__':
    main()
