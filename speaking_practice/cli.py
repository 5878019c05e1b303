"""Command-line entry point: ``python -m speaking_practice``."""
from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from pron_core.config import DEFAULT_L1, MODEL_URL, SERVICE_HOST, SERVICE_PORT, configure_logging
from pron_core.errors import PronunciationError
from .pipeline import PronunciationScorer, result_to_dict
from .recording import AudioBuffer, read_chunks


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="speaking_practice",
        description="Score English pronunciation with a CTC acoustic model.",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: PRON_LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    score = sub.add_parser("score", help="Score a recording against the expected text")
    score.add_argument("--model", default=MODEL_URL, help="ONNX/TorchScript model path or URL (tokens.txt must sit next to it)")
    score.add_argument("--audio", required=True, help="Audio file (any format librosa can read), or - for raw float32 16kHz mono PCM on stdin")
    score.add_argument("--text", required=True, help="Expected text")
    score.add_argument("--l1", default=DEFAULT_L1, help="Speaker's native language tag; empty disables adjustment")

    compare = sub.add_parser("compare", help="Word-level diff of expected vs spoken text")
    compare.add_argument("expected")
    compare.add_argument("spoken")

    serve = sub.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", default=SERVICE_HOST)
    serve.add_argument("--port", type=int, default=SERVICE_PORT)
    serve.add_argument("--model", default=MODEL_URL)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "compare":
        result = PronunciationScorer.compare(args.expected, args.spoken)
        print(json.dumps(result_to_dict(result), indent=2, ensure_ascii=False))
        return 0

    if args.command == "serve":
        from .service import run
        run(host=args.host, port=args.port, model_url=args.model)
        return 0

    from pron_core.audio import load_audio_16k_mono

    try:
        scorer = PronunciationScorer.from_model_url(args.model)
        if args.audio == "-":
            audio = AudioBuffer().record(read_chunks(sys.stdin.buffer))
        else:
            audio = load_audio_16k_mono(args.audio)
        result = scorer.score(audio, args.text, l1=args.l1 or None)
    except PronunciationError as e:
        print(json.dumps({"error": str(e)}, indent=2))
        return 1

    print(json.dumps(result_to_dict(result), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
