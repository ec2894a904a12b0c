"""
Labeled URL dataset loading.

Reads a CSV with a header row and at least the columns 'url' and 'label'
(0 = benign, 1 = scam) and streams (feature vector, label) pairs for training.
Any unusable row aborts the load; rows are never skipped.

Usage:
    from dataset import load_dataset

    for vector, label in load_dataset("data/urls.csv"):
        ...
"""

import logging
import os
from typing import Iterable, Iterator, NamedTuple

import numpy as np
import pandas as pd

from errors import DatasetError, InvalidURLError
from features import extract_features

logger = logging.getLogger(__name__)

URL_COLUMN = "url"
LABEL_COLUMN = "label"


class LabeledExample(NamedTuple):
    url: str
    label: int


def _coerce_label(raw: str, row: int) -> int:
    value = pd.to_numeric(raw.strip(), errors="coerce") if raw.strip() else float("nan")
    if value not in (0, 1):
        raise DatasetError(f"Row {row}: label must be 0 or 1, got {raw!r}")
    return int(value)


def read_labeled_urls(path: str | os.PathLike) -> list[LabeledExample]:
    """
    Read labeled URLs from a CSV file.

    Args:
        path: Path to a CSV with 'url' and 'label' columns.

    Returns:
        List of LabeledExample in file order.

    Raises:
        DatasetError: if the file is missing or unreadable, a column is
            missing, or any row has an empty url or a label other than 0/1.
    """
    if not os.path.isfile(path):
        raise DatasetError(f"Dataset not found: {path}")

    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise DatasetError(f"Cannot read dataset {path}: {e}") from e

    missing = [c for c in (URL_COLUMN, LABEL_COLUMN) if c not in df.columns]
    if missing:
        raise DatasetError(f"Dataset {path} is missing columns: {missing}")

    examples = []
    # Row numbers are 1-based data rows (header excluded)
    for row, (url, raw_label) in enumerate(zip(df[URL_COLUMN], df[LABEL_COLUMN]), start=1):
        url = url.strip()
        if not url:
            raise DatasetError(f"Row {row}: empty url")
        examples.append(LabeledExample(url, _coerce_label(raw_label, row)))

    logger.info("Read %d labeled URLs from %s", len(examples), path)
    return examples


def iter_feature_rows(examples: Iterable[LabeledExample]) -> Iterator[tuple[np.ndarray, int]]:
    """Yield (feature vector, label) for each example, failing on the first bad URL."""
    for row, example in enumerate(examples, start=1):
        try:
            vector = extract_features(example.url)
        except InvalidURLError as e:
            raise DatasetError(f"Row {row}: {e}") from e
        yield vector, example.label


def load_dataset(path: str | os.PathLike) -> Iterator[tuple[np.ndarray, int]]:
    """Read a labeled CSV and stream its feature rows."""
    return iter_feature_rows(read_labeled_urls(path))
