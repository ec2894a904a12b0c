import logging
import os
import pickle
import tempfile

import torch
import torch.nn as nn

from errors import IncompatibleModelError, ModelNotFoundError
from features import FEATURE_NAMES

logger = logging.getLogger(__name__)

HIDDEN_UNITS = 12

MODEL_DIR = os.getenv("SCAM_URL_MODEL_DIR", "checkpoints")
MODEL_FILENAME = "scam_mlp.pt"


class ScamURLMLP(nn.Module):
    """
    Two-layer MLP scoring a URL feature vector as P(scam).

    Architecture: Linear(input_dim, 12) -> ReLU -> Linear(12, 1) -> Sigmoid
    """

    def __init__(self, input_dim: int = len(FEATURE_NAMES)):
        super().__init__()
        self.input_dim = input_dim
        self.net = nn.Sequential(
            nn.Linear(input_dim, HIDDEN_UNITS),
            nn.ReLU(),
            nn.Linear(HIDDEN_UNITS, 1),
        )
        for layer in self.net:
            if isinstance(layer, nn.Linear):
                nn.init.xavier_uniform_(layer.weight)
                nn.init.zeros_(layer.bias)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return torch.sigmoid(self.net(x)).squeeze(1)


def model_path(model_dir: str | os.PathLike = MODEL_DIR) -> str:
    return os.path.join(model_dir, MODEL_FILENAME)


def save_model(model: ScamURLMLP, model_dir: str | os.PathLike = MODEL_DIR) -> str:
    """
    Persist weights and feature layout, replacing any previous model.

    The file is written next to its destination and moved into place, so a
    reader sees either the old model or the new one, never a partial file.
    """
    os.makedirs(model_dir, exist_ok=True)
    path = model_path(model_dir)
    payload = {
        "state_dict": model.state_dict(),
        "input_dim": model.input_dim,
        "feature_names": list(FEATURE_NAMES),
    }
    fd, tmp_path = tempfile.mkstemp(prefix=".scam_mlp-", suffix=".tmp", dir=model_dir)
    try:
        with os.fdopen(fd, "wb") as f:
            torch.save(payload, f)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    logger.info("Model saved to %s", path)
    return path


def load_model(model_dir: str | os.PathLike = MODEL_DIR) -> ScamURLMLP:
    """
    Load the persisted model in eval mode.

    Raises:
        ModelNotFoundError: if no model has been trained into model_dir.
        IncompatibleModelError: if the model file is unreadable or was trained
            on another feature layout.
    """
    path = model_path(model_dir)
    if not os.path.isfile(path):
        raise ModelNotFoundError(f"No trained model at {path}; run training first")

    try:
        payload = torch.load(path, weights_only=True)
    except (EOFError, ValueError, RuntimeError, pickle.UnpicklingError) as e:
        raise IncompatibleModelError(f"Model at {path} is unreadable ({e}); retrain it") from e
    if not isinstance(payload, dict) or "state_dict" not in payload:
        raise IncompatibleModelError(f"Model at {path} is not a saved ScamURLMLP; retrain it")
    if payload.get("feature_names") != list(FEATURE_NAMES) or payload.get("input_dim") != len(FEATURE_NAMES):
        raise IncompatibleModelError(
            f"Model at {path} was trained on a different feature layout "
            f"({payload.get('input_dim')} inputs, expected {len(FEATURE_NAMES)}); retrain it"
        )

    model = ScamURLMLP(payload["input_dim"])
    try:
        model.load_state_dict(payload["state_dict"])
    except RuntimeError as e:
        raise IncompatibleModelError(f"Model at {path} has mismatched weights ({e}); retrain it") from e
    model.eval()
    return model
