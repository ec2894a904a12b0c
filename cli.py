"""
Command line entry point.

Usage:
    scam-url train --data data/urls.csv
    scam-url predict https://bantuanrakyat.my/claim --show-features
    scam-url evaluate --test data/holdout.csv
"""

import argparse
import json
import logging
import os
import sys

from errors import ScamURLError
from evaluate import evaluate, format_report
from features import extract_features
from inference import predict_url
from model import MODEL_DIR
from train import train_from_csv

DEFAULT_DATA = os.getenv("SCAM_URL_DATA", "data/urls.csv")
DEFAULT_URL = "https://app.mykasih.net/sara2/checkstatus"

logger = logging.getLogger("scam_url")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="scam-url", description="Scam URL detector")
    parser.add_argument("--model-dir", default=MODEL_DIR, help="Directory holding the trained model")
    sub = parser.add_subparsers(dest="command", required=True)

    p_train = sub.add_parser("train", help="Train a model from a labeled CSV")
    p_train.add_argument("--data", default=DEFAULT_DATA, help="CSV with url,label columns")

    p_predict = sub.add_parser("predict", help="Classify a URL")
    p_predict.add_argument("url", nargs="?", default=DEFAULT_URL)
    p_predict.add_argument("--show-features", action="store_true", help="Print the extracted features")

    p_eval = sub.add_parser("evaluate", help="Evaluate the trained model on a labeled CSV")
    p_eval.add_argument("--test", required=True, help="CSV with url,label columns")

    return parser


def run(args: argparse.Namespace) -> None:
    if args.command == "train":
        train_from_csv(args.data, args.model_dir)
        print(f"Model trained and saved to {args.model_dir}")
    elif args.command == "predict":
        prediction = predict_url(args.url, model_dir=args.model_dir)
        print(f"Prediction for {prediction.url}: {prediction.label} ({prediction.score:.2f})")
        if args.show_features:
            print(json.dumps(extract_features(args.url, vectorize=False), indent=2))
    elif args.command == "evaluate":
        print(format_report(evaluate(args.test, args.model_dir)))


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=os.getenv("SCAM_URL_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    args = build_parser().parse_args(argv)
    try:
        run(args)
    except ScamURLError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
