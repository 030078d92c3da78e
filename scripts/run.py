#!/usr/bin/env python
"""CLI for speaker-scribe."""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from speaker_scribe import Orchestrator, align_words_to_segments, load_config
from speaker_scribe.alignment import speaker_labels
from speaker_scribe.core import ScribeError
from speaker_scribe.devices import SUPPORTED_DEVICES, detect_device, resolve_device
from speaker_scribe.models import ProgressChannel, get_model_registry
from speaker_scribe.utils import setup_logging
from speaker_scribe.utils.audio import load_audio


async def _print_progress(channel: ProgressChannel) -> None:
    async for event in channel:
        if event.get("status") == "loading":
            print(f"  {event['data']}")
        else:
            print(f"  [{event.get('status')}] {event.get('name', '')}")


async def _transcribe(args, config) -> int:
    device = args.device or detect_device()
    orchestrator = Orchestrator(registry=get_model_registry(config), config=config)

    print(f"Loading models ({device})...")
    channel = ProgressChannel()
    printer = asyncio.create_task(_print_progress(channel))
    await orchestrator.prepare_models(device, channel)
    await printer

    audio = load_audio(args.file, config.pipeline.sample_rate)
    print(f"Audio loaded: {len(audio) / config.pipeline.sample_rate:.1f}s")

    result = await orchestrator.transcribe(audio, args.language)
    groups = align_words_to_segments(
        result.words, result.segments, config.segmentation.no_speaker_label
    )

    if args.json:
        print(json.dumps({
            **result.to_dict(),
            "groups": [g.to_dict() for g in groups],
            "time": result.elapsed_ms,
        }, indent=2))
        return 0

    print(f"\n{len(result.words)} words, {len(groups)} turns, "
          f"speakers: {', '.join(speaker_labels(groups)) or 'N/A'} "
          f"({result.elapsed_ms:.0f}ms)")
    print("-" * 50)
    for group in groups:
        print(f"\n{group.label}  {group.start:.2f} -> {group.end:.2f}")
        print(f"    {group.text}")
    return 0


def cmd_transcribe(args):
    """Transcribe a file and print speaker turns."""
    config = load_config(config_path=args.config, env=args.env, config_dir=args.config_dir)
    setup_logging(level=config.log_level, format_style=config.log_format)

    try:
        return asyncio.run(_transcribe(args, config))
    except ScribeError as e:
        print(f"✗ Error: {e}")
        return 1


def cmd_serve(args):
    """Run the websocket host."""
    import uvicorn

    from speaker_scribe.api import create_app
    from speaker_scribe.api.config import APIConfig

    config = load_config(config_path=args.config, env=args.env, config_dir=args.config_dir)
    app = create_app(APIConfig(host=args.host, port=args.port), scribe_config=config)
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def cmd_devices(args):
    """Show device profiles."""
    print(f"\nDetected: {detect_device()}\n")
    for key in SUPPORTED_DEVICES:
        profile = resolve_device(key)
        role = "primary" if profile.is_primary else "fallback"
        print(f"  {key} ({role})")
        print(f"    transcription: {profile.transcription_precision} on {profile.backend}")
        print(f"    segmentation:  {profile.segmentation_precision} on {profile.segmentation_device}")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="speaker-scribe - local transcription with speaker turns",
    )
    parser.add_argument("--env", "-e", default=None, help="Environment")
    parser.add_argument("--config-dir", "-c", default="configs", help="Config directory")
    parser.add_argument("--config", help="Extra config file")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Transcribe
    p = subparsers.add_parser("transcribe", help="Transcribe an audio file")
    p.add_argument("file", help="Audio file")
    p.add_argument("--device", "-d", choices=SUPPORTED_DEVICES, help="Compute device (default: detect)")
    p.add_argument("--language", "-l", default="en", help="Language code")
    p.add_argument("--json", action="store_true", help="Print JSON instead of turns")
    p.set_defaults(func=cmd_transcribe)

    # Serve
    p = subparsers.add_parser("serve", help="Run the websocket server")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", "-p", type=int, default=8000)
    p.set_defaults(func=cmd_serve)

    # Devices
    p = subparsers.add_parser("devices", help="Show device profiles")
    p.set_defaults(func=cmd_devices)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
