#!/usr/bin/env python3
"""
CLI: Generate one short procedural video from one prompt.
Usage:
  python scripts/generate.py "Your prompt here"
  python scripts/generate.py "An aurora over a neon city" --output aurora.webm
  python scripts/generate.py "storm at sea" --describe
"""
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import argparse
import json
import logging

from promptreel.config import load_config
from promptreel.errors import GenerationError
from promptreel.pipeline import generate_video
from promptreel.procedural import extract_features


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a short procedural animation from a prompt (local, no external model)."
    )
    parser.add_argument(
        "prompt",
        type=str,
        help="Text prompt describing the scene.",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output video path (default: output/reel_<timestamp>.<ext>).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config YAML (default: config/default.yaml).",
    )
    parser.add_argument(
        "--describe",
        action="store_true",
        help="Print the style derived from the prompt and exit without rendering.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: from config, INFO).",
    )
    args = parser.parse_args()

    config = load_config(args.config)
    level = (args.log_level or config.get("logging", {}).get("level") or "INFO").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.describe:
        print(json.dumps(extract_features(args.prompt).to_dict(), indent=2))
        return 0

    print(f"Prompt: {args.prompt[:60]}{'...' if len(args.prompt) > 60 else ''}")
    try:
        path = generate_video(
            args.prompt,
            output_path=args.output,
            config=config,
            on_stage=lambda label: print(f"  {label}..."),
        )
    except GenerationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"Done. Video: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
