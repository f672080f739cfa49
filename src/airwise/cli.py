from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from .aqi import AqiCalculator
from .config import COMPONENT_KEYS, LOG_LEVEL
from .utils import ensure_columns, setup_logging

logger = logging.getLogger(__name__)


def read_table(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix in [".xlsx", ".xls"]:
        return pd.read_excel(path)
    if suffix in [".csv", ".txt"]:
        return pd.read_csv(path)
    if suffix == ".json":
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        # provider responses wrap the records in a "list" field
        if isinstance(data, dict) and "list" in data:
            data = data["list"]
        return pd.json_normalize(data)
    raise ValueError(f"Unsupported input file type: {path.suffix}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Compute EPA AQI and pollutant statuses for a table of readings.")
    ap.add_argument("--input", required=True, help="Path to a CSV/Excel/JSON file of readings (µg/m³).")
    ap.add_argument("--output", required=True, help="Path of the CSV file to write.")
    ap.add_argument("--log-level", default=LOG_LEVEL, help="Logging level (default: %(default)s).")
    args = ap.parse_args(argv)

    setup_logging(args.log_level)

    inp = Path(args.input)
    df = read_table(inp)
    logger.info(f"Read {len(df)} readings from {inp}")

    calculator = AqiCalculator()
    ensure_columns(calculator.preprocessor.transform(df), COMPONENT_KEYS)
    result = calculator.compute(df)

    out = Path(args.output)
    out.parent.mkdir(parents=True, exist_ok=True)
    df.join(result, rsuffix=" result").to_csv(out, index=False)
    logger.info(f"Saved {len(result)} rows to {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
