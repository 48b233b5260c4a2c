#!/usr/bin/env python3
"""
Interaction graph construction and rendering
============================================
Undirected networkx graph of driver, partner and drug nodes, rendered with
force-directed layouts.
"""

import logging
from collections import Counter
from pathlib import Path
from typing import Iterable, List, Optional, Union

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.lines import Line2D
import matplotlib.patches as mpatches
import networkx as nx
import pandas as pd

from core.data_structures import DriverGene, DrugGeneInteraction, NetworkSummary
from pdacnet.constants import EDGE_COLORS, LAYOUTS, ROLE_COLORS
from pdacnet.utils import sanitize_name

logger = logging.getLogger(__name__)

DRUG_EDGE_CATEGORY = 'drug_target'


def build_graph(edges: pd.DataFrame,
                drivers: Iterable[Union[str, DriverGene]]) -> nx.Graph:
    """
    Build an undirected graph from an aggregated or combined edge table.

    Nodes get ``role`` (driver/partner) and ``color``; edges get
    ``category``, ``weight``, ``interaction_type`` and ``color``. When the
    same pair appears under several interaction types the higher-weight
    attributes win and the types are joined.
    """
    driver_set = {d.symbol if isinstance(d, DriverGene) else d for d in drivers}
    G = nx.Graph()

    for _, row in edges.iterrows():
        a, b = row['GeneA'], row['GeneB']
        for gene in (a, b):
            if gene not in G:
                role = 'driver' if gene in driver_set else 'partner'
                G.add_node(gene, role=role, color=ROLE_COLORS[role])

        category = row.get('Category', 'weak')
        interaction_type = row.get('Interaction_Type', 'synthetic_lethality')
        weight = float(row.get('Composite_Score', 1.0))
        if G.has_edge(a, b):
            data = G.edges[a, b]
            types = set(data['interaction_type'].split(',')) | {interaction_type}
            data['interaction_type'] = ','.join(sorted(types))
            if weight > data['weight']:
                data.update(weight=weight, category=category, color=EDGE_COLORS.get(category, '#999999'))
            continue
        G.add_edge(a, b, category=category, weight=weight,
                   interaction_type=interaction_type,
                   color=EDGE_COLORS.get(category, '#999999'))

    logger.info(f"Built graph: {G.number_of_nodes()} nodes, {G.number_of_edges()} edges")
    return G


def add_drug_nodes(G: nx.Graph, drug_hits: Union[pd.DataFrame, List[DrugGeneInteraction]]) -> nx.Graph:
    """Add one drug node per annotated gene, linked to that gene"""
    if isinstance(drug_hits, pd.DataFrame):
        rows = drug_hits.to_dict('records')
    else:
        rows = [h.to_row() for h in drug_hits]

    added = 0
    for row in rows:
        gene, drug = row['Gene'], row['Drug']
        if gene not in G:
            logger.debug(f"Drug {drug} targets {gene}, which is not in the graph; skipping")
            continue
        if drug in G and G.nodes[drug].get('role') != 'drug':
            # drug name collides with a gene symbol
            drug = f"{drug} (drug)"
        if drug not in G:
            G.add_node(drug, role='drug', color=ROLE_COLORS['drug'])
            added += 1
        G.add_edge(gene, drug, category=DRUG_EDGE_CATEGORY,
                   weight=float(row.get('Literature_Count', 0)),
                   interaction_type=DRUG_EDGE_CATEGORY,
                   color=EDGE_COLORS[DRUG_EDGE_CATEGORY])
    logger.info(f"Added {added} drug nodes to the graph")
    return G


def nodes_by_role(G: nx.Graph, role: str) -> List[str]:
    return sorted(n for n, r in G.nodes(data='role') if r == role)


def partner_genes(G: nx.Graph) -> List[str]:
    """Non-driver gene nodes"""
    return nodes_by_role(G, 'partner')


def network_summary(G: nx.Graph, top_n: int = 10) -> NetworkSummary:
    roles = Counter(r for _, r in G.nodes(data='role'))
    categories = Counter(c for _, _, c in G.edges(data='category'))
    hubs = sorted(G.degree(), key=lambda x: (-x[1], x[0]))[:top_n]
    return NetworkSummary(
        n_nodes=G.number_of_nodes(),
        n_edges=G.number_of_edges(),
        role_counts=dict(roles),
        category_counts=dict(categories),
        density=nx.density(G) if G.number_of_nodes() > 1 else 0.0,
        n_components=nx.number_connected_components(G) if G.number_of_nodes() else 0,
        top_hubs=[(n, int(d)) for n, d in hubs],
    )


def edges_to_frame(G: nx.Graph) -> pd.DataFrame:
    """Flat edge list of the final graph, including drug edges"""
    rows = []
    for a, b, data in G.edges(data=True):
        rows.append({
            'Source': a,
            'Target': b,
            'Source_Role': G.nodes[a].get('role'),
            'Target_Role': G.nodes[b].get('role'),
            'Interaction_Type': data.get('interaction_type'),
            'Category': data.get('category'),
            'Weight': data.get('weight'),
        })
    return pd.DataFrame(rows, columns=['Source', 'Target', 'Source_Role', 'Target_Role',
                                       'Interaction_Type', 'Category', 'Weight'])


def _layout(G: nx.Graph, layout: str, seed: int):
    if layout == 'spring':
        return nx.spring_layout(G, seed=seed, k=1.5 / max(1, G.number_of_nodes()) ** 0.5)
    if layout == 'kamada_kawai':
        # kamada_kawai needs finite distances; lay out components side by side
        if nx.is_connected(G):
            return nx.kamada_kawai_layout(G)
        return nx.spring_layout(G, pos=_component_seed(G), seed=seed)
    raise ValueError(f"Unknown layout '{layout}'; expected one of {LAYOUTS}")


def _component_seed(G: nx.Graph):
    pos = {}
    for i, comp in enumerate(sorted(nx.connected_components(G), key=len, reverse=True)):
        sub = G.subgraph(comp)
        sub_pos = nx.kamada_kawai_layout(sub) if len(comp) > 1 else {next(iter(comp)): (0.0, 0.0)}
        for node, (x, y) in sub_pos.items():
            pos[node] = (x + 2.5 * i, y)
    return pos


def render_network(G: nx.Graph, out_path, layout: str = 'spring',
                   title: Optional[str] = None, seed: int = 42) -> Path:
    """Draw the graph with a force-directed layout and save it as PNG"""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(12, 10))
    if G.number_of_nodes() == 0:
        ax.text(0.5, 0.5, 'Empty network', ha='center', va='center')
    else:
        pos = _layout(G, layout, seed)
        sizes = [900 if r == 'driver' else 500 if r == 'drug' else 300
                 for _, r in G.nodes(data='role')]
        nx.draw_networkx_edges(G, pos, ax=ax, alpha=0.7,
                               edge_color=[c for _, _, c in G.edges(data='color')],
                               width=[1.0 + min(3.0, w or 0) for _, _, w in G.edges(data='weight')])
        nx.draw_networkx_nodes(G, pos, ax=ax, node_size=sizes,
                               node_color=[c for _, c in G.nodes(data='color')],
                               edgecolors='white', linewidths=1.5)
        nx.draw_networkx_labels(G, pos, ax=ax, font_size=7)

    role_handles = [mpatches.Patch(color=c, label=r) for r, c in ROLE_COLORS.items()]
    present = {c for _, _, c in G.edges(data='category')}
    edge_handles = [Line2D([0], [0], color=EDGE_COLORS[c], lw=2, label=c.replace('_', ' '))
                    for c in EDGE_COLORS if c in present]
    ax.legend(handles=role_handles + edge_handles, loc='upper left', frameon=False, fontsize=8)
    ax.set_title(title or f"PDAC interaction network ({layout} layout)")
    ax.axis('off')

    fig.savefig(out_path, dpi=200, bbox_inches='tight')
    plt.close(fig)
    logger.info(f"Saved network figure to {out_path}")
    return out_path


def render_layouts(G: nx.Graph, out_dir, prefix: str = 'network',
                   layouts=LAYOUTS) -> List[Path]:
    """Render the graph once per layout"""
    out_dir = Path(out_dir)
    return [render_network(G, out_dir / f"{sanitize_name(prefix)}_{layout}.png", layout=layout)
            for layout in layouts]
