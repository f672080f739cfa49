from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import pandas as pd

from .config import COMPONENT_KEYS
from .readings import canonical_key
from .utils import safe_copy

logger = logging.getLogger(__name__)


@dataclass
class ReadingPreprocessor:
    """Stateless preprocessor that *never* drops rows.

    It brings a raw table of readings into the shape the calculators expect:
    - flattening of provider ``components.<key>`` / ``main.aqi`` columns
    - renaming of pollutant aliases (``pm2.5``, ``ozone``, ...) to component keys
    - numeric coercion of pollutant columns (unparseable -> NaN)
    """

    pollutant_cols: Sequence[str] = COMPONENT_KEYS
    provider_col: str = "aqi"

    def transform(self, df_raw: pd.DataFrame) -> pd.DataFrame:
        df = safe_copy(df_raw)

        # --- flatten nested provider columns ---
        renames = {}
        for c in df.columns:
            if not isinstance(c, str):
                continue
            name = c
            if name.startswith("components."):
                name = name[len("components."):]
            elif name == "main.aqi":
                name = self.provider_col
            key = canonical_key(name)
            if key is not None:
                name = key
            if name != c:
                renames[c] = name

        # one source column per target name: a column already under the
        # canonical name wins, otherwise the first alias in column order
        taken = {c for c in df.columns if c not in renames}
        kept = {}
        skipped = []
        for old, new in renames.items():
            if new in taken:
                skipped.append(old)
            else:
                kept[old] = new
                taken.add(new)
        if skipped:
            logger.warning(f"Columns {skipped} duplicate an already mapped pollutant, left unmapped")
        df = df.rename(columns=kept)

        # --- numeric coercion ---
        for c in self.pollutant_cols:
            if c in df.columns:
                before = df[c].isna().sum()
                df[c] = pd.to_numeric(df[c], errors="coerce")
                coerced = int(df[c].isna().sum() - before)
                if coerced:
                    logger.debug(f"{coerced} non-numeric value(s) in '{c}' set to NaN")

        if self.provider_col in df.columns:
            df[self.provider_col] = pd.to_numeric(df[self.provider_col], errors="coerce")

        return df
