import pytest
import torch

from errors import IncompatibleModelError, InvalidURLError, ModelNotFoundError
from features import FEATURE_NAMES
from inference import SAFE, SUSPICIOUS, THRESHOLD, Prediction, classify_score, predict_url, score_url
from model import MODEL_FILENAME, ScamURLMLP, load_model, save_model


def test_threshold_boundary():
    assert THRESHOLD == 0.7
    assert classify_score(0.7) == SAFE
    assert classify_score(0.7000001) == SUSPICIOUS
    assert classify_score(0.0) == SAFE
    assert classify_score(1.0) == SUSPICIOUS


def test_predict_without_model(tmp_path):
    with pytest.raises(ModelNotFoundError):
        predict_url("http://example.com", model_dir=tmp_path)


def test_predict_returns_prediction(trained_model_dir):
    p = predict_url("bantuanrakyat.my/claim", model_dir=trained_model_dir)
    assert isinstance(p, Prediction)
    assert p.url == "bantuanrakyat.my/claim"
    assert p.threshold == THRESHOLD
    assert p.label == classify_score(p.score)


def test_predict_matches_score_url(trained_model_dir):
    model = load_model(trained_model_dir)
    url = "http://portalmykasih.com/login"
    assert predict_url(url, model=model).score == score_url(model, url)
    assert predict_url(url, model_dir=trained_model_dir).score == score_url(model, url)


def test_predict_invalid_url(trained_model_dir):
    with pytest.raises(InvalidURLError):
        predict_url("http://", model_dir=trained_model_dir)


def test_forced_scores():
    model = ScamURLMLP()
    with torch.no_grad():
        for p in model.parameters():
            p.zero_()
        model.net[2].bias.fill_(5.0)
    assert predict_url("http://example.com", model=model).label == SUSPICIOUS
    with torch.no_grad():
        model.net[2].bias.fill_(-5.0)
    assert predict_url("http://example.com", model=model).label == SAFE


def test_save_and_load_roundtrip(tmp_path):
    model = ScamURLMLP()
    save_model(model, tmp_path)
    loaded = load_model(tmp_path)
    assert not loaded.training
    url = "http://asasrahmah.my"
    assert score_url(loaded, url) == score_url(model, url)


def test_incompatible_model(tmp_path):
    torch.save(
        {
            "state_dict": ScamURLMLP(len(FEATURE_NAMES) - 1).state_dict(),
            "input_dim": len(FEATURE_NAMES) - 1,
            "feature_names": FEATURE_NAMES[:-1],
        },
        tmp_path / MODEL_FILENAME,
    )
    with pytest.raises(IncompatibleModelError):
        load_model(tmp_path)
    # callers that only handle the missing-model case still catch it
    with pytest.raises(ModelNotFoundError):
        predict_url("http://example.com", model_dir=tmp_path)


@pytest.mark.parametrize("content", [b"", b"not a torch file", b"PK\x03\x04truncated"])
def test_unreadable_model_file(tmp_path, content):
    (tmp_path / MODEL_FILENAME).write_bytes(content)
    with pytest.raises(IncompatibleModelError, match="retrain"):
        load_model(tmp_path)
