"""
Evaluation of a trained model on a labeled CSV of raw URLs.

Extracts features for every row, scores them with the trained model and
reports classification metrics at the fixed decision threshold.

Usage:
    scam-url evaluate --test data/holdout.csv
"""

import os

import numpy as np
import torch
from sklearn.metrics import (
    confusion_matrix,
    f1_score,
    precision_score,
    recall_score,
    roc_auc_score,
)

from dataset import load_dataset
from errors import DatasetError
from inference import THRESHOLD
from model import MODEL_DIR, load_model


def evaluate(test_path: str | os.PathLike, model_dir: str | os.PathLike = MODEL_DIR) -> dict:
    """
    Score every row of test_path and compute metrics.

    Returns:
        dict with precision, recall, f1, roc_auc (None when only one class is
        present) and the confusion matrix counts tn, fp, fn, tp.
    """
    model = load_model(model_dir)

    rows = list(load_dataset(test_path))
    if not rows:
        raise DatasetError(f"Test set {test_path} has no rows")
    X = np.stack([vector for vector, _ in rows])
    y = np.array([label for _, label in rows], dtype=int)

    with torch.no_grad():
        probs = model(torch.from_numpy(X)).numpy()

    preds = (probs > THRESHOLD).astype(int)
    tn, fp, fn, tp = confusion_matrix(y, preds, labels=[0, 1]).ravel()

    return {
        "n": int(len(y)),
        "precision": float(precision_score(y, preds, zero_division=0)),
        "recall": float(recall_score(y, preds, zero_division=0)),
        "f1": float(f1_score(y, preds, zero_division=0)),
        "roc_auc": float(roc_auc_score(y, probs)) if len(np.unique(y)) == 2 else None,
        "tn": int(tn),
        "fp": int(fp),
        "fn": int(fn),
        "tp": int(tp),
    }


def format_report(metrics: dict) -> str:
    auc = metrics["roc_auc"]
    return "\n".join(
        [
            f"--- Evaluation ({metrics['n']} URLs, threshold {THRESHOLD}) ---",
            f"  Precision: {metrics['precision']:.4f}",
            f"  Recall:    {metrics['recall']:.4f}",
            f"  F1:        {metrics['f1']:.4f}",
            f"  ROC-AUC:   {auc:.4f}" if auc is not None else "  ROC-AUC:   n/a (single class)",
            "",
            "  Confusion Matrix:",
            f"    TN={metrics['tn']}  FP={metrics['fp']}",
            f"    FN={metrics['fn']}  TP={metrics['tp']}",
        ]
    )
