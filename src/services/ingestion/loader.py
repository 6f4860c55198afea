"""
CSV loading logic with encoding handling
"""

import pandas as pd
from pathlib import Path
from typing import Any, Dict, List
import logging
from .config import CSV_ENCODINGS, SAMPLE_ROW_COUNT

# Configure logger
logger = logging.getLogger(__name__)


class CSVLoader:
    """Loads arbitrary product CSV files as header list + raw rows"""

    def load(self, csv_path: Path) -> pd.DataFrame:
        """
        Load CSV file with encoding fallback

        All values are read as text so identifiers keep leading zeros.

        Args:
            csv_path: Path to CSV file

        Returns:
            DataFrame with loaded data

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            ValueError: If the file cannot be parsed as CSV
        """
        csv_path = Path(csv_path)

        # Check file exists
        if not csv_path.exists():
            error_msg = f"CSV file not found: {csv_path.absolute()}"
            logger.error(error_msg)
            raise FileNotFoundError(error_msg)

        logger.info(f"Starting CSV load from: {csv_path.absolute()}")

        # Get file size
        file_size_mb = csv_path.stat().st_size / (1024 * 1024)
        logger.debug(f"CSV file size: {file_size_mb:.2f} MB")

        df = None
        for encoding in CSV_ENCODINGS:
            try:
                logger.debug(f"Attempting to load CSV with {encoding} encoding...")
                df = pd.read_csv(csv_path, encoding=encoding, dtype=str)
                break
            except UnicodeDecodeError as e:
                logger.warning(f"{encoding} encoding failed: {e}")
            except Exception as e:
                error_msg = f"Failed to load CSV: {e}"
                logger.error(error_msg)
                raise ValueError(error_msg) from e

        if df is None:
            error_msg = f"Failed to load CSV with encodings {CSV_ENCODINGS}"
            logger.error(error_msg)
            raise ValueError(error_msg)

        df.columns = [str(c).strip() for c in df.columns]

        logger.info(f"CSV loaded: {len(df)} rows, {len(df.columns)} columns")
        logger.debug(f"Columns found: {list(df.columns)}")

        return df

    def to_rows(self, df: pd.DataFrame) -> List[Dict[str, Any]]:
        """
        Convert DataFrame to raw rows, replacing NaN with None

        Args:
            df: DataFrame with product data

        Returns:
            One header -> value dict per row, in file order
        """
        return df.astype(object).where(pd.notna(df), None).to_dict("records")

    def get_sample_rows(
        self, df: pd.DataFrame, n: int = SAMPLE_ROW_COUNT
    ) -> List[Dict[str, Any]]:
        """First N rows, used as examples for field mapping inference"""
        return self.to_rows(df.head(n))

    def load_rows(self, csv_path: Path) -> List[Dict[str, Any]]:
        """
        Convenience method: Load CSV and convert to raw rows in one step

        Args:
            csv_path: Path to CSV file

        Returns:
            List of header -> value dicts
        """
        return self.to_rows(self.load(csv_path))
