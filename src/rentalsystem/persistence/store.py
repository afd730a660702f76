# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
CSV file access for the reconciler.

Files are read with every value as a string, so ids such as ``007`` keep
their leading zeros and empty cells stay empty strings. Writes go to a
temporary file that replaces the target once complete.
"""

from __future__ import annotations

import logging
import os
import warnings
from pathlib import Path
from typing import List

import pandas as pd

from ..core.errors import StorageError
from ..core.primitives import StorageSettings
from .records import RecordSchema, Row

logger = logging.getLogger(__name__)


class FlatFileStore:
    """Reads and writes record files under ``settings.data_dir``."""

    def __init__(self, settings: StorageSettings):
        self.settings = settings

    @property
    def data_dir(self) -> Path:
        return Path(self.settings.data_dir)

    def path_for(self, schema: RecordSchema) -> Path:
        return self.settings.path_for(schema.filename(self.settings))

    def read(self, schema: RecordSchema) -> List[Row]:
        """
        Rows of a record file as column-name dictionaries.

        Missing trailing cells read as empty strings. Cells beyond the known
        columns are dropped and pandas' parser warning about it is logged.

        Raises:
            StorageError: If the data directory is missing, the file is
                missing and ``create_missing`` is off, or the file cannot be read
        """
        if not self.data_dir.is_dir():
            logger.error(f"Data directory {self.data_dir} does not exist")
            raise StorageError(f"Data directory {self.data_dir} does not exist")
        path = self.path_for(schema)
        if not path.exists():
            if self.settings.create_missing:
                logger.warning(f"{path.name} not found; loading no {schema.name}")
                return []
            logger.error(f"Required file {path} does not exist")
            raise StorageError(f"Required file {path} does not exist")

        columns = list(schema.read_columns)
        try:
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter("always", pd.errors.ParserWarning)
                frame = pd.read_csv(
                    path,
                    header=None,
                    names=columns,
                    index_col=False,
                    skiprows=1 if self.settings.has_header else 0,
                    dtype=str,
                    keep_default_na=False,
                    skip_blank_lines=True,
                    engine="python",
                )
        except pd.errors.EmptyDataError:
            return []
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {path}: {e}")
            raise StorageError(f"Failed to read {path}: {e}") from e

        for warning in caught:
            logger.warning(f"{path.name}: {warning.message}")
        frame = frame.fillna("")
        rows: List[Row] = [
            {column: str(value) for column, value in record.items()}
            for record in frame.to_dict("records")
        ]
        logger.debug(f"Read {len(rows)} row(s) from {path.name}")
        return rows

    def write(self, schema: RecordSchema, rows: List[Row]) -> Path:
        """
        Replace a record file with ``rows`` in the canonical column layout.

        Raises:
            StorageError: If the directory or file cannot be written
        """
        path = self.path_for(schema)
        temp_path = path.with_name(path.name + ".tmp")
        frame = pd.DataFrame(rows, columns=list(schema.columns))
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            frame.to_csv(
                temp_path,
                index=False,
                header=self.settings.has_header,
                lineterminator="\n",
            )
            os.replace(temp_path, path)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            raise StorageError(f"Failed to write {path}: {e}") from e
        logger.debug(f"Wrote {len(rows)} row(s) to {path.name}")
        return path

