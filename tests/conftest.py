import pytest

from train import train_from_csv


@pytest.fixture(scope="session")
def two_row_csv(tmp_path_factory):
    path = tmp_path_factory.mktemp("data") / "urls.csv"
    path.write_text(
        "url,label\n"
        "http://bantuanrakyat.my/claim,1\n"
        "http://example.com,0\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture(scope="session")
def trained_model_dir(tmp_path_factory, two_row_csv):
    model_dir = tmp_path_factory.mktemp("checkpoints")
    train_from_csv(two_row_csv, model_dir)
    return model_dir
