#!/usr/bin/env python3
"""
Run the PDAC interaction-network pipeline end to end.

Reads inputs from --data-dir (default layout, see pdacnet/constants.py) or a
JSON --config, writes CSV/JSON artifacts to --output and PNG figures to
--figures.

Flags:
  --no-drugs        Skip the DGIdb lookup (offline runs)
  --no-comutation   Skip the sequencing co-mutation stage
  --no-figures      Skip network rendering
"""
import sys
import time
import logging
import argparse
from pathlib import Path


def main(argv=None):
    parser = argparse.ArgumentParser(description='Build the PDAC candidate interaction network')
    parser.add_argument('--config', type=str, default=None,
                        help='JSON config file (overrides --data-dir layout)')
    parser.add_argument('--data-dir', type=str, default='data',
                        help='Directory holding the default input files')
    parser.add_argument('--output', type=str, default='results',
                        help='Directory for CSV/JSON artifacts')
    parser.add_argument('--figures', type=str, default='figures',
                        help='Directory for network figures')
    parser.add_argument('--driver-q', type=float, default=None,
                        help='Maximum driver q-value')
    parser.add_argument('--cache-dir', type=str, default=None,
                        help='DGIdb response cache directory')
    parser.add_argument('--no-drugs', action='store_true', help='Skip DGIdb annotation')
    parser.add_argument('--no-comutation', action='store_true', help='Skip co-mutation stage')
    parser.add_argument('--no-figures', action='store_true', help='Skip figure rendering')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s:%(name)s:%(message)s')

    from pdacnet.config import PipelineConfig
    from pdac_network import PDACNetworkPipeline, export_results

    config = PipelineConfig.from_json(args.config) if args.config else PipelineConfig.default(args.data_dir)
    if args.driver_q is not None:
        config.driver_q_threshold = args.driver_q
    if args.cache_dir:
        config.cache_dir = Path(args.cache_dir)
    if args.no_drugs:
        config.annotate_drugs = False
    if args.no_comutation:
        config.comutation_file = None
    if args.no_figures:
        config.render_figures = False

    print(f"Building PDAC network from {len(config.sl_sources)} synthetic-lethality sources...", flush=True)
    t0 = time.time()
    try:
        result = PDACNetworkPipeline(config, figures_dir=args.figures).run()
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr, flush=True)
        return 1

    written = export_results(result, args.output)
    summary = result.summary

    print(f"\n{'='*70}")
    print(f"Nodes: {summary.n_nodes} {summary.role_counts}")
    print(f"Edges: {summary.n_edges} {summary.category_counts}")
    if summary.top_hubs:
        print("Top hubs: " + ', '.join(f"{g} ({d})" for g, d in summary.top_hubs[:5]))
    for name, path in written.items():
        print(f"  {name}: {path}")
    print(f"{'='*70}")
    print(f"\nTotal time: {time.time()-t0:.1f}s")
    return 0


if __name__ == '__main__':
    sys.exit(main())
