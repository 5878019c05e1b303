"""Configuration constants for CTC pronunciation scoring."""
from __future__ import annotations

import logging
import os
from typing import List

# Audio front-end (matches the acoustic model's preprocessor)
SAMPLE_RATE = 16000
N_FFT = 512
WIN_LENGTH = 400  # 25ms at 16kHz
HOP_LENGTH = 160  # 10ms at 16kHz
N_MELS = 80
MEL_FMIN = 0.0
MEL_FMAX = SAMPLE_RATE / 2  # 8000
PRE_EMPHASIS = 0.97
DITHER = 1e-5
LOG_FLOOR = 1e-10

# Adaptive hop length tiers: (words-per-minute above, hop length)
# Faster speech gets finer temporal resolution
HOP_LENGTH_TIERS = ((240, 80), (180, 120))

# Speech rate estimation
SPEECH_RATE_FRAME = 320  # 20ms frames
SPEECH_RATE_HOP = 160  # 10ms hop
SPEECH_RATE_SMOOTH = 5  # +/-5 frames (~100ms)
SPEECH_RATE_PEAK_RATIO = 0.15
SYLLABLES_PER_WORD = 1.4
DEFAULT_SPEECH_RATE_WPM = 150
MIN_SPEECH_RATE_FRAMES = 5

# Capture: samples per chunk handed to the buffer by the producer
CAPTURE_CHUNK_SAMPLES = 4096

# Subword vocabulary
BLANK_ID = 1024
UNK_ID = 0
BLANK_PIECE = "<blk>"
WORD_PREFIX = "▁"  # SentencePiece word boundary marker
MAX_PIECE_LENGTH = 20

# Viterbi sentinel (large negative instead of -inf)
NEG_INF = -1e30

# GOP sigmoid: maps -10 -> ~0, -2 -> 0.5, 0 -> ~0.79
GOP_CENTER = -2.0
GOP_TEMPERATURE = 1.5
GOP_DEFAULT_LOG_PROB = -10.0

# L1 accent adjustment
L1_THRESHOLD = 0.45  # phonemes at or above this are acceptable
L1_CAP = 0.85  # adjusted scores never exceed this
L1_TIER_BOOST = {1: 0.50, 2: 0.40, 3: 0.25}
L1_PROSODY_BOOST = 0.10
L1_CONFIRMED_MULTIPLIER = 1.5
L1_PROSODY_FEEDBACK = "prosody/accent"

# --- Environment-driven settings ---

MODEL_URL = os.environ.get("PRON_MODEL_URL", "models/stt-nemo-ctc-small-int4.onnx")
TOKENS_FILENAME = "tokens.txt"
HTTP_TIMEOUT = float(os.environ.get("PRON_HTTP_TIMEOUT", "30"))
ONNX_PROVIDERS: List[str] = [
    p.strip() for p in os.environ.get("PRON_ONNX_PROVIDERS", "CPUExecutionProvider").split(",") if p.strip()
]
ONNX_INPUT_NAMES = ("audio_signal", "length")
DEFAULT_L1 = os.environ.get("PRON_DEFAULT_L1", "pt-BR")
SERVICE_HOST = os.environ.get("PRON_SERVICE_HOST", "0.0.0.0")
SERVICE_PORT = int(os.environ.get("PRON_SERVICE_PORT", "8001"))
LOG_LEVEL = os.environ.get("PRON_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for entry points (CLI, HTTP service).

    Library modules only create loggers; handlers are set up here.
    """
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)
