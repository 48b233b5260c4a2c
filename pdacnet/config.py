#!/usr/bin/env python3
"""
Pipeline configuration
======================
Dataclasses describing the input files and thresholds of one run.
Defaults come from pdacnet.constants; a JSON file can override them.

Example config.json:
    {
      "data_dir": "data",
      "driver_file": "intogen_PAAD.tsv",
      "driver_q_threshold": 0.05,
      "sl_sources": [
        {"source_id": "synlethdb", "path": "Human_SL.csv", "fmt": "csv",
         "columns": {"n1.name": "GeneA", "n2.name": "GeneB"},
         "evidence": "SynLethDB curated", "confidence": "medium"}
      ]
    }
"""

import copy
import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, List, Optional

from pdacnet.constants import (
    CONFIDENCE_WEIGHTS, DEFAULT_SL_SOURCES, DEFAULT_DRIVER_FILE,
    DEFAULT_ESSENTIAL_FILE, DEFAULT_COMUTATION_FILE, DRIVER_Q_THRESHOLD,
    COMUTATION_Q_THRESHOLD, DGIDB_BASE_URL,
)

logger = logging.getLogger(__name__)


@dataclass
class SourceSpec:
    """
    One synthetic-lethality input table.

    Attributes:
        source_id: Identifier written to the ``source`` column
        path: File path (csv, tsv/txt or xlsx)
        columns: Raw column name -> canonical name (GeneA, GeneB, Score, Evidence)
        evidence: Default evidence label when no Evidence column is mapped
        confidence: Experimental confidence tier (key of CONFIDENCE_WEIGHTS)
        fmt: Reader format; inferred from the suffix when None
        sheet: Excel sheet name or index
        row_filter: Raw column -> allowed values; other rows are dropped
    """
    source_id: str
    path: Path
    columns: Dict[str, str]
    evidence: str
    confidence: str = 'medium'
    fmt: Optional[str] = None
    sheet: Optional[object] = None
    row_filter: Dict[str, List[str]] = field(default_factory=dict)

    def __post_init__(self):
        self.path = Path(self.path)
        if self.confidence not in CONFIDENCE_WEIGHTS:
            raise ValueError(
                f"Unknown confidence tier '{self.confidence}' for source {self.source_id}; "
                f"expected one of {sorted(CONFIDENCE_WEIGHTS)}")
        mapped = set(self.columns.values())
        if not {'GeneA', 'GeneB'} <= mapped:
            raise ValueError(f"Source {self.source_id} must map columns to GeneA and GeneB")

    @property
    def weight(self) -> float:
        return CONFIDENCE_WEIGHTS[self.confidence]

    @classmethod
    def from_dict(cls, data: Dict, base_dir: Optional[Path] = None) -> 'SourceSpec':
        data = dict(data)
        path = Path(data.pop('path'))
        if base_dir is not None and not path.is_absolute():
            path = Path(base_dir) / path
        return cls(path=path, **data)


@dataclass
class PipelineConfig:
    """All inputs and thresholds for one pipeline run"""
    sl_sources: List[SourceSpec]
    driver_file: Path
    essential_file: Path
    comutation_file: Optional[Path] = None
    driver_q_threshold: float = DRIVER_Q_THRESHOLD
    comutation_q_threshold: float = COMUTATION_Q_THRESHOLD
    dgidb_url: str = DGIDB_BASE_URL
    cache_dir: Optional[Path] = Path('./api_cache')
    annotate_drugs: bool = True
    render_figures: bool = True

    @classmethod
    def default(cls, data_dir: str = './data') -> 'PipelineConfig':
        """Default file layout under ``data_dir``"""
        base = Path(data_dir)
        return cls(
            sl_sources=[SourceSpec.from_dict(copy.deepcopy(s), base) for s in DEFAULT_SL_SOURCES],
            driver_file=base / DEFAULT_DRIVER_FILE,
            essential_file=base / DEFAULT_ESSENTIAL_FILE,
            comutation_file=base / DEFAULT_COMUTATION_FILE,
        )

    @classmethod
    def from_json(cls, path: str) -> 'PipelineConfig':
        """
        Load a config file. Relative paths are resolved against ``data_dir``
        (itself relative to the config file), keys not given fall back to
        the defaults.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        raw = json.loads(path.read_text())

        known = {f.name for f in fields(cls)} | {'data_dir'}
        unknown = set(raw) - known
        if unknown:
            raise ValueError(f"Unknown config keys in {path}: {sorted(unknown)}")

        base = path.parent / raw.pop('data_dir', '.')
        config = cls.default(str(base))

        if 'sl_sources' in raw:
            config.sl_sources = [SourceSpec.from_dict(s, base) for s in raw.pop('sl_sources')]
        for key in ('driver_file', 'essential_file', 'comutation_file', 'cache_dir'):
            if key in raw:
                value = raw.pop(key)
                setattr(config, key, _resolve(base, value) if value is not None else None)
        for key, value in raw.items():
            setattr(config, key, value)

        logger.info(f"Loaded config from {path} ({len(config.sl_sources)} SL sources)")
        return config


def _resolve(base: Path, value: str) -> Path:
    p = Path(value)
    return p if p.is_absolute() else base / p
