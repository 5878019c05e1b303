"""Message-driven recognition worker.

The worker owns the loaded scorer and answers ``init`` / ``recognize``
requests with ``ready`` / ``progress`` / ``result`` / ``error`` responses.
It processes one request at a time; there are no retries or cancellation.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Literal, Optional, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pron_core.errors import EnvironmentCompatibilityError, PronunciationError
from pron_core.features.mel import compute_mel_spectrogram
from .pipeline import PronunciationScorer, result_to_dict
from .recording import AudioBuffer, ensure_environment

logger = logging.getLogger(__name__)


class SttWorkerRequest(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    type: Literal["init", "recognize"]
    audio_data: Optional[Any] = None  # float32 samples (array or list)
    audio_chunks: Optional[List[Any]] = None  # captured chunks, used when audio_data is absent
    expected_text: Optional[str] = None
    model_url: Optional[str] = None
    l1: Optional[str] = None


class SttWorkerResponse(BaseModel):
    type: Literal["ready", "result", "error", "progress"]
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    progress: Optional[float] = Field(default=None, ge=0.0, le=1.0)


Post = Callable[[SttWorkerResponse], None]
ScorerFactory = Callable[[str], PronunciationScorer]


class SttWorker:
    """Handles worker requests and reports through ``post``.

    Args:
        post: Callback receiving every response
        scorer_factory: Builds a scorer from a model URL
    """

    def __init__(self, post: Post, scorer_factory: ScorerFactory = PronunciationScorer.from_model_url):
        self.post = post
        self.scorer_factory = scorer_factory
        self.scorer: Optional[PronunciationScorer] = None
        self.buffer = AudioBuffer()

    async def handle(self, request: Union[SttWorkerRequest, Dict[str, Any]]) -> None:
        if isinstance(request, dict):
            try:
                request = SttWorkerRequest.model_validate(request)
            except ValidationError as e:
                logger.warning("Rejected malformed request: %s", e)
                self.post(SttWorkerResponse(type="error", error=f"Invalid request: {e}"))
                return

        if request.type == "init":
            if request.model_url:
                await self.init_model(request.model_url)
        elif request.type == "recognize":
            has_audio = request.audio_data is not None or request.audio_chunks is not None
            if not (has_audio and request.expected_text):
                logger.debug("Ignoring recognize request without audio or expected text")
                return
            audio = request.audio_data
            if audio is None:
                try:
                    audio = self.buffer.record(request.audio_chunks)
                except PronunciationError as e:
                    self.post(SttWorkerResponse(type="error", error=str(e)))
                    return
            await self.recognize(audio, request.expected_text, request.l1)

    async def init_model(self, model_url: str) -> None:
        try:
            ensure_environment()
        except EnvironmentCompatibilityError as e:
            self.post(SttWorkerResponse(type="error", error=str(e)))
            return

        try:
            self.scorer = await asyncio.to_thread(self.scorer_factory, model_url)
        except Exception as e:
            logger.exception("Model load failed")
            self.post(SttWorkerResponse(type="error", error=f"Failed to load model: {e}"))
            return
        self.post(SttWorkerResponse(type="ready"))

    async def recognize(self, audio_data: Any, expected_text: str, l1: Optional[str] = None) -> None:
        if self.scorer is None or self.scorer.model is None:
            self.post(SttWorkerResponse(type="error", error="Model not loaded"))
            return

        try:
            self.post(SttWorkerResponse(type="progress", progress=0.3))
            mel = compute_mel_spectrogram(np.asarray(audio_data, dtype=np.float32))

            self.post(SttWorkerResponse(type="progress", progress=0.5))
            log_probs = await self.scorer.model.arun(mel)

            self.post(SttWorkerResponse(type="progress", progress=0.8))
            result = self.scorer.apply_l1(self.scorer.process_ctc_output(log_probs, expected_text), l1)
        except Exception as e:
            logger.exception("Recognition failed")
            self.post(SttWorkerResponse(type="error", error=f"Recognition failed: {e}"))
            return

        self.post(SttWorkerResponse(type="result", result=result_to_dict(result)))


async def serve(
    inbox: "asyncio.Queue[Any]",
    outbox: "asyncio.Queue[SttWorkerResponse]",
    scorer_factory: ScorerFactory = PronunciationScorer.from_model_url,
) -> None:
    """Process requests from ``inbox`` until a ``None`` sentinel arrives."""
    worker = SttWorker(outbox.put_nowait, scorer_factory=scorer_factory)
    while True:
        request = await inbox.get()
        if request is None:
            break
        await worker.handle(request)
