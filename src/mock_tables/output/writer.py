"""
Output Writer - writes collected tables to disk.

Supports:
- CSV
- Parquet (via pyarrow)
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Dict

import pandas as pd

from mock_tables.models import GenerationConfig

logger = logging.getLogger(__name__)


class OutputWriter:
    """
    Writes generated tables in every configured format.

    Output Structure:
        output/<run_id>/
        ├── csv/
        │   ├── customers.csv
        │   └── ...
        ├── parquet/
        │   ├── customers.parquet
        │   └── ...
        └── manifest.json       # Generation manifest
    """

    def __init__(self, config: GenerationConfig):
        """
        Initialize the output writer.

        Args:
            config: Generation configuration
        """
        self.config = config

        # Set up output directory
        self.output_dir = config.output_dir / config.run_id
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def get_output_dir(self) -> Path:
        """Return the output directory path."""
        return self.output_dir

    def write(self, data: Dict[str, pd.DataFrame]) -> Dict[str, Dict[str, Path]]:
        """
        Write tables to all configured output formats.

        Args:
            data: Dict of table_name -> DataFrame

        Returns:
            Dict of format -> (table_name -> output_path)
        """
        output_paths: Dict[str, Dict[str, Path]] = {}

        for fmt in self.config.output_formats:
            if fmt == "csv":
                output_paths["csv"] = self._write_csv(data)
            elif fmt == "parquet":
                output_paths["parquet"] = self._write_parquet(data)
            else:
                logger.warning(f"Unknown output format: {fmt}")

        self._write_manifest(data, output_paths)

        return output_paths

    def _format_dir(self, fmt: str) -> Path:
        fmt_dir = self.output_dir / fmt
        fmt_dir.mkdir(parents=True, exist_ok=True)
        return fmt_dir

    def _write_csv(self, data: Dict[str, pd.DataFrame]) -> Dict[str, Path]:
        """Write each table to a CSV file."""
        csv_dir = self._format_dir("csv")
        output_paths = {}

        for table_name, df in data.items():
            output_path = csv_dir / f"{table_name.lower()}.csv"
            df.to_csv(
                output_path,
                index=False,
                date_format="%Y-%m-%d %H:%M:%S",
                na_rep="",
            )
            output_paths[table_name] = output_path
            logger.info(f"Wrote {len(df)} rows to {output_path}")

        return output_paths

    def _write_parquet(self, data: Dict[str, pd.DataFrame]) -> Dict[str, Path]:
        """Write each table to a Parquet file."""
        parquet_dir = self._format_dir("parquet")
        output_paths = {}

        for table_name, df in data.items():
            output_path = parquet_dir / f"{table_name.lower()}.parquet"
            # pyarrow has no UUID type; store them as strings
            _stringify_uuids(df).to_parquet(output_path, engine="pyarrow", index=False)
            output_paths[table_name] = output_path
            logger.info(f"Wrote {len(df)} rows to {output_path}")

        return output_paths

    def _write_manifest(
        self,
        data: Dict[str, pd.DataFrame],
        output_paths: Dict[str, Dict[str, Path]],
    ) -> Path:
        """Write generation manifest."""
        manifest = {
            "generated_at": datetime.now().isoformat(),
            "run_id": self.config.run_id,
            "graph": self.config.graph,
            "graph_options": self.config.graph_options,
            "seed": self.config.seed,
            "tables": {},
            "output_formats": list(output_paths.keys()),
        }

        for table_name, df in data.items():
            manifest["tables"][table_name] = {
                "rows": len(df),
                "columns": len(df.columns),
                "column_list": [str(c) for c in df.columns],
            }

        manifest_path = self.output_dir / "manifest.json"
        with open(manifest_path, "w") as f:
            json.dump(manifest, f, indent=2, default=str)

        logger.info(f"Wrote manifest to {manifest_path}")
        return manifest_path


def _stringify_uuids(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c) for c in df.columns]
    for col in df.columns:
        if df[col].dtype == object:
            df[col] = df[col].map(lambda v: str(v) if isinstance(v, uuid.UUID) else v)
    return df
