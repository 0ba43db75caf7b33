"""
Parquet persistence for range-read results.
"""

import os
import logging
from typing import List, Optional
from datetime import datetime

import pandas as pd

from configuration import RECORD_FILE_PREFIX
from persistence.record import ReadRecord

logger = logging.getLogger(__name__)

RECORD_COLUMNS = [
    'object_key', 'range_start', 'range_len', 'bytes', 'latency_ms',
    'read_calls', 'read_size', 'start_ts', 'end_ts',
]


def records_to_dataframe(records: List[ReadRecord]) -> pd.DataFrame:
    """Convert records to a DataFrame with one row per read."""
    data = [{column: getattr(record, column) for column in RECORD_COLUMNS}
            for record in records]
    return pd.DataFrame(data, columns=RECORD_COLUMNS)


class ParquetPersistence:
    """Parquet file persistence for range-read records.

    Records are kept in memory during the run and written out in one file
    afterwards, so persistence never adds I/O between timed reads.

    Attributes:
        output_dir: Directory where Parquet files will be saved
        records: Records accumulated during the run
    """

    def __init__(self, output_dir: str = "results"):
        """Initialize Parquet persistence.

        Args:
            output_dir: Directory for saving Parquet files (default: 'results')
        """
        self.output_dir: str = output_dir
        self.records: List[ReadRecord] = []

        os.makedirs(output_dir, exist_ok=True)

    def store_record(self, record: ReadRecord) -> None:
        """Store a record in memory."""
        self.records.append(record)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert stored records to a DataFrame with one row per read."""
        return records_to_dataframe(self.records)

    def save_to_file(self, filename_prefix: str = RECORD_FILE_PREFIX) -> Optional[str]:
        """Save all records to a Parquet file.

        Args:
            filename_prefix: Prefix for the generated filename

        Returns:
            Path to the saved file, or None if no records to save
        """
        if not self.records:
            return None

        logger.info(f"Saving {len(self.records)} records to file")
        df = self.to_dataframe()

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{filename_prefix}_{timestamp}.parquet"
        filepath = os.path.join(self.output_dir, filename)

        df.to_parquet(filepath, index=False)

        return filepath
