"""
FastAPI service for scam URL detection.

Exposes the trained ScamURLMLP via REST endpoints. Training is not exposed;
run `scam-url train` and then POST /reload (or restart) to pick up the model.

Usage:
    uvicorn app:app --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

from errors import InvalidURLError, ModelNotFoundError
from inference import predict_url
from model import MODEL_DIR, load_model

logger = logging.getLogger(__name__)


def _try_load(model_dir: str):
    try:
        return load_model(model_dir)
    except ModelNotFoundError as e:
        logger.warning("%s", e)
        return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.model_dir = getattr(app.state, "model_dir", MODEL_DIR)
    app.state.model = _try_load(app.state.model_dir)
    yield


app = FastAPI(
    title="scam-url-sentinel",
    description="Scam URL detection using a small MLP over lexical URL features",
    version="1.0.0",
    lifespan=lifespan,
)


class PredictRequest(BaseModel):
    url: str


class PredictResponse(BaseModel):
    url: str
    score: float
    label: str
    threshold: float


@app.get("/health")
def health(request: Request):
    return {"status": "ok", "model_loaded": request.app.state.model is not None}


@app.post("/reload")
def reload(request: Request):
    request.app.state.model = _try_load(request.app.state.model_dir)
    return {"model_loaded": request.app.state.model is not None}


@app.post("/predict", response_model=PredictResponse)
def predict(req: PredictRequest, request: Request):
    """Classify a URL as Suspicious or Safe."""
    model = request.app.state.model
    if model is None:
        raise HTTPException(status_code=503, detail="No trained model loaded")
    try:
        prediction = predict_url(req.url, model=model)
    except InvalidURLError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return PredictResponse(
        url=prediction.url,
        score=round(prediction.score, 4),
        label=prediction.label,
        threshold=prediction.threshold,
    )
