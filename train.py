"""
Training for ScamURLMLP.

Builds the feature matrix from a stream of (feature vector, label) pairs,
fits the fixed architecture for a fixed number of epochs and saves the
result to the model directory, replacing any previous model.

Usage:
    from train import train_from_csv

    model = train_from_csv("data/urls.csv", model_dir="checkpoints")
"""

import logging
import os
import random
from typing import Iterable

import numpy as np
import torch
import torch.nn as nn
from sklearn.metrics import accuracy_score
from torch.utils.data import DataLoader, TensorDataset

from dataset import load_dataset
from errors import TrainingError
from features import FEATURE_NAMES
from model import MODEL_DIR, ScamURLMLP, save_model

logger = logging.getLogger(__name__)

SEED = 42
EPOCHS = 50
BATCH_SIZE = 32
LEARNING_RATE = 1e-3


def set_seed(seed: int = SEED):
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)


def build_matrix(rows: Iterable[tuple[np.ndarray, int]]) -> tuple[np.ndarray, np.ndarray]:
    """
    Stack (feature vector, label) pairs into X, y arrays.

    Raises:
        TrainingError: if there are no rows, a vector's width differs from the
            current feature layout, or a label is not 0/1.
    """
    expected = len(FEATURE_NAMES)
    vectors, labels = [], []
    for i, (vector, label) in enumerate(rows, start=1):
        vector = np.asarray(vector, dtype=np.float32)
        if vector.shape != (expected,):
            raise TrainingError(f"Example {i} has {vector.size} features, expected {expected}")
        if label not in (0, 1):
            raise TrainingError(f"Example {i} has label {label!r}, expected 0 or 1")
        vectors.append(vector)
        labels.append(label)

    if not vectors:
        raise TrainingError("Training set is empty")

    return np.stack(vectors), np.array(labels, dtype=np.float32)


def fit(X: np.ndarray, y: np.ndarray) -> ScamURLMLP:
    """Fit a fresh ScamURLMLP on X, y; the example order is reshuffled every epoch."""
    train_ds = TensorDataset(torch.from_numpy(X), torch.from_numpy(y))
    train_loader = DataLoader(train_ds, batch_size=BATCH_SIZE, shuffle=True)

    model = ScamURLMLP(X.shape[1])
    criterion = nn.BCELoss()
    optimizer = torch.optim.Adam(model.parameters(), lr=LEARNING_RATE)

    for epoch in range(1, EPOCHS + 1):
        model.train()
        total_loss, n_batches = 0.0, 0
        all_probs, all_labels = [], []
        for xb, yb in train_loader:
            optimizer.zero_grad()
            probs = model(xb)
            loss = criterion(probs, yb)
            loss.backward()
            optimizer.step()
            total_loss += loss.item()
            n_batches += 1
            all_probs.extend(probs.detach().numpy())
            all_labels.extend(yb.numpy())

        acc = accuracy_score(np.array(all_labels), (np.array(all_probs) >= 0.5).astype(np.float32))
        logger.debug("Epoch %2d/%d | Loss: %.4f | Acc: %.4f", epoch, EPOCHS, total_loss / n_batches, acc)

    logger.info("Finished %d epochs | Loss: %.4f | Acc: %.4f", EPOCHS, total_loss / n_batches, acc)
    model.eval()
    return model


def train(
    rows: Iterable[tuple[np.ndarray, int]],
    model_dir: str | os.PathLike = MODEL_DIR,
    seed: int = SEED,
) -> ScamURLMLP:
    """
    Train a model on the given feature rows and persist it.

    Args:
        rows: (feature vector, label) pairs, e.g. from dataset.load_dataset.
        model_dir: Directory the trained model is written to.
        seed: Seed for python, numpy and torch RNGs.

    Returns:
        The trained model, in eval mode.

    Raises:
        DatasetError: propagated from the row stream.
        TrainingError: if the rows are empty or inconsistent.
    """
    set_seed(seed)

    X, y = build_matrix(rows)
    n_pos = int(y.sum())
    logger.info("Training on %d examples | Scam: %d | Benign: %d", len(y), n_pos, len(y) - n_pos)

    model = fit(X, y)
    save_model(model, model_dir)
    return model


def train_from_csv(path: str | os.PathLike, model_dir: str | os.PathLike = MODEL_DIR) -> ScamURLMLP:
    """Train from a labeled CSV (columns url, label)."""
    logger.info("Loading dataset %s", path)
    return train(load_dataset(path), model_dir)
