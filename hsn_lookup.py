import logging

import pandas as pd # type: ignore
from rapidfuzz import process, fuzz, utils as fuzz_utils # type: ignore

from config import get_settings
from tax_calc import clamp_gst_rate

logger = logging.getLogger(__name__)


class HSNLookup:
    def __init__(self, csv_path: str):
        """Load HSN code dataset (CSV must have columns: hsn_code, Description, rate)."""
        # read everything as text so HSN codes keep leading zeros
        self.df = pd.read_csv(csv_path, dtype=str)
        # normalize columns (case-insensitive)
        self.df.columns = [str(c).strip().lower() for c in self.df.columns]
        if "hsn" in self.df.columns and "hsn_code" not in self.df.columns:
            self.df.rename(columns={"hsn": "hsn_code"}, inplace=True)
        if "hsn_code" not in self.df.columns:
            raise ValueError("CSV must have an HSN code column")
        if "description" not in self.df.columns:
            raise ValueError("CSV must have a Description column")
        if "rate" not in self.df.columns:
            raise ValueError("CSV must have a Rate column")
        self.df["hsn_code"] = self.df["hsn_code"].fillna("").astype(str).str.strip()
        self.df["description"] = self.df["description"].fillna("").astype(str)
        self.df["rate"] = pd.to_numeric(self.df["rate"], errors="coerce").fillna(0.0)
        logger.info("Loaded %d HSN rows from %s", len(self.df), csv_path)

    def suggest(self, description: str, limit: int = 1):
        """Suggest closest HSN codes (and their clamped GST rates) for a product name."""
        if not description or not description.strip():
            return []
        choices = self.df['description'].tolist()
        matches = process.extract(description, choices, scorer=fuzz.WRatio, processor=fuzz_utils.default_process, limit=limit)
        results = []
        for match, score, idx in matches:
            row = self.df.iloc[idx]
            results.append({
                "hsn_code": str(row['hsn_code']),
                "description": row['description'],
                "rate": clamp_gst_rate(row['rate']),
                "score": score
            })
        return results

    def rate_for(self, description: str, default: float = 0.0) -> float:
        sugg = self.suggest(description, limit=1)
        if not sugg:
            logger.debug("No HSN match for %r, using default rate %s", description, default)
            return default
        return sugg[0]["rate"]

    @classmethod
    def from_settings(cls):
        """Load the lookup from the configured HSN CSV path."""
        return cls(get_settings().hsn_csv_path)
