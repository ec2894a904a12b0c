"""
Inference for the scam URL classifier.

Loads the trained ScamURLMLP and scores raw URLs. A score above the fixed
threshold (0.7) is labeled "Suspicious", anything else "Safe".

Usage:
    from inference import predict_url

    prediction = predict_url("https://bantuanrakyat.my/claim")
    print(f"{prediction.label} ({prediction.score:.2f})")
"""

import os
from dataclasses import dataclass

import numpy as np
import torch

from features import extract_features
from model import MODEL_DIR, ScamURLMLP, load_model

THRESHOLD = 0.7

SUSPICIOUS = "Suspicious"
SAFE = "Safe"


@dataclass(frozen=True)
class Prediction:
    url: str
    score: float
    label: str
    threshold: float = THRESHOLD


def classify_score(score: float) -> str:
    """Map a scam probability to its label (strictly above THRESHOLD is suspicious)."""
    return SUSPICIOUS if score > THRESHOLD else SAFE


def score_url(model: ScamURLMLP, url: str) -> float:
    """
    Score a raw URL with a loaded model.

    Returns:
        Scam probability between 0.0 (safe) and 1.0 (scam).

    Raises:
        InvalidURLError: if the URL cannot be parsed.
    """
    x = torch.from_numpy(np.asarray(extract_features(url), dtype=np.float32).reshape(1, -1))
    model.eval()
    with torch.no_grad():
        return float(model(x)[0])


def predict_url(
    url: str,
    model: ScamURLMLP | None = None,
    model_dir: str | os.PathLike = MODEL_DIR,
) -> Prediction:
    """
    Classify a raw URL.

    Args:
        url: Raw URL string (e.g., "https://app.mykasih.net/sara2/checkstatus").
        model: Already loaded model; loaded from model_dir when None.
        model_dir: Directory holding the trained model.

    Raises:
        ModelNotFoundError: if model is None and nothing has been trained yet.
        InvalidURLError: if the URL cannot be parsed.
    """
    if model is None:
        model = load_model(model_dir)
    score = score_url(model, url)
    return Prediction(url=url, score=score, label=classify_score(score))
