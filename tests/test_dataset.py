import numpy as np
import pytest

from dataset import LabeledExample, iter_feature_rows, load_dataset, read_labeled_urls
from errors import DatasetError
from features import FEATURE_NAMES


def write_csv(tmp_path, text, name="urls.csv"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_read_labeled_urls(tmp_path):
    path = write_csv(tmp_path, "url,label,source\nhttp://a.my, 1 ,x\nexample.com,0,y\nb.com,1.0,z\n")
    assert read_labeled_urls(path) == [
        LabeledExample("http://a.my", 1),
        LabeledExample("example.com", 0),
        LabeledExample("b.com", 1),
    ]


def test_load_dataset_streams_vectors(tmp_path):
    path = write_csv(tmp_path, "url,label\nhttp://bantuanrakyat.my/claim,1\nhttp://example.com,0\n")
    rows = list(load_dataset(path))
    assert [label for _, label in rows] == [1, 0]
    assert all(vec.shape == (len(FEATURE_NAMES),) for vec, _ in rows)


def test_missing_file(tmp_path):
    with pytest.raises(DatasetError, match="not found"):
        read_labeled_urls(tmp_path / "nope.csv")


def test_empty_file(tmp_path):
    with pytest.raises(DatasetError):
        read_labeled_urls(write_csv(tmp_path, ""))


def test_missing_column(tmp_path):
    with pytest.raises(DatasetError, match="label"):
        read_labeled_urls(write_csv(tmp_path, "url,type\nhttp://a.com,benign\n"))


@pytest.mark.parametrize("label", ["", "2", "yes", "0.5"])
def test_bad_label(tmp_path, label):
    with pytest.raises(DatasetError, match="Row 2"):
        read_labeled_urls(write_csv(tmp_path, f"url,label\nhttp://a.com,0\nhttp://b.com,{label}\n"))


def test_empty_url(tmp_path):
    with pytest.raises(DatasetError, match="Row 1"):
        read_labeled_urls(write_csv(tmp_path, "url,label\n,1\n"))


def test_unparseable_url_aborts(tmp_path):
    path = write_csv(tmp_path, "url,label\nhttp://ok.com,0\nhttp://bad:port/,1\nhttp://never.com,0\n")
    rows = load_dataset(path)
    vec, label = next(rows)
    assert label == 0 and isinstance(vec, np.ndarray)
    with pytest.raises(DatasetError, match="Row 2"):
        next(rows)


def test_iter_feature_rows_wraps_invalid_url():
    rows = iter_feature_rows([LabeledExample("http://", 1)])
    with pytest.raises(DatasetError):
        list(rows)
