"""HTTP service exposing pronunciation scoring."""
from __future__ import annotations

import logging
import os
import tempfile
from typing import Optional

from flask import Flask, jsonify, request

from pron_core.audio import load_audio_16k_mono
from pron_core.config import DEFAULT_L1, MODEL_URL, SERVICE_HOST, SERVICE_PORT, configure_logging
from pron_core.errors import AudioDecodeError, PronunciationError
from .pipeline import PronunciationScorer, result_to_dict

logger = logging.getLogger(__name__)


def create_app(scorer: Optional[PronunciationScorer] = None) -> Flask:
    app = Flask(__name__)
    app.config["SCORER"] = scorer

    @app.route("/health", methods=["GET"])
    def health():
        current = app.config["SCORER"]
        return jsonify({
            "status": "ok",
            "service": "pronunciation-scorer",
            "model_loaded": current is not None and current.model is not None,
        })

    @app.route("/recognize", methods=["POST"])
    def recognize():
        current = app.config["SCORER"]
        if "audio" not in request.files:
            return jsonify({"error": "No audio file provided"}), 400
        expected_text = request.form.get("expected_text", "").strip()
        if not expected_text:
            return jsonify({"error": "No expected_text provided"}), 400
        if current is None or current.model is None:
            return jsonify({"error": "Model not loaded"}), 503

        l1 = request.form.get("l1", DEFAULT_L1) or None
        file = request.files["audio"]

        fd, tmp_path = tempfile.mkstemp(suffix=".wav")
        try:
            os.close(fd)
            file.save(tmp_path)
            try:
                audio = load_audio_16k_mono(tmp_path)
            except AudioDecodeError as e:
                return jsonify({"error": str(e)}), 400
            result = current.score(audio, expected_text, l1=l1)
            return jsonify(result_to_dict(result))
        except PronunciationError as e:
            logger.error("Recognition failed: %s", e)
            return jsonify({"error": f"Recognition failed: {e}"}), 500
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    @app.route("/compare", methods=["POST"])
    def compare():
        payload = request.get_json(silent=True) or {}
        expected = payload.get("expected")
        spoken = payload.get("spoken")
        if not isinstance(expected, str) or not isinstance(spoken, str):
            return jsonify({"error": "Both 'expected' and 'spoken' strings are required"}), 400
        return jsonify(result_to_dict(PronunciationScorer.compare(expected, spoken)))

    return app


def run(host: str = SERVICE_HOST, port: int = SERVICE_PORT, model_url: str = MODEL_URL) -> None:
    """Load the model and serve; without a model only /compare works."""
    configure_logging()
    scorer = None
    try:
        scorer = PronunciationScorer.from_model_url(model_url)
    except PronunciationError as e:
        logger.error("Starting without acoustic model: %s", e)
    create_app(scorer).run(host=host, port=port, debug=False)
