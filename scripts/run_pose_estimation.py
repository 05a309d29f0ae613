#!/usr/bin/env python3
"""
MoveNet Pose Estimation

Main script per l'esecuzione della stima della posa su video o camera,
con overlay dello scheletro, FPS e latenza di inferenza.

Usage:
    # Singolo video, output in data/output/<nome_video>.{mp4,jsonl}
    python run_pose_estimation.py --video <path>

    # Anteprima dal vivo dalla camera 0
    python run_pose_estimation.py --camera 0

    # Con config personalizzato
    python run_pose_estimation.py --video <path> --config <config.yaml>
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

import yaml

# funzioni di utilità per aggiungere src al path per le importazioni
SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from movenet_pose.config import config_from_dict
from movenet_pose.errors import PoseEstimationError
from movenet_pose.pipeline.image_processor import ImageProcessor, InputParam
from movenet_pose.pipeline.pipeline_video import run_live_loop, run_pose_pipeline


def load_raw_config(config_path: Path) -> dict:
    """carica file di configurazione YAML."""
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def resolve_path(value: str | None, project_root: Path) -> Path | None:
    """Risolve un percorso relativo rispetto alla root del progetto."""
    if not value:
        return None
    path = Path(value)
    return path if path.is_absolute() else project_root / path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run MoveNet pose estimation on a video or camera",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Input modes (mutually exclusive)
    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument(
        "--video", "-v",
        type=Path,
        help="Video file path",
    )
    input_group.add_argument(
        "--camera",
        type=int,
        help="Camera device index (live preview)",
    )

    parser.add_argument(
        "--work-dir", "-w",
        type=Path,
        help="Working directory containing model/<model_filename>",
    )
    parser.add_argument(
        "--num-threads", "-t",
        type=int,
        help="Inference threads",
    )
    parser.add_argument(
        "--output-dir", "-o",
        type=Path,
        help="Output directory (default: paths.output_root in config)",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=PROJECT_ROOT / "config" / "default.yaml",
        help="Configuration file",
    )

    # Processing options (override config)
    parser.add_argument(
        "--stride", "-s",
        type=int,
        help="Process every N-th frame",
    )
    parser.add_argument(
        "--device", "-d",
        type=str,
        choices=["auto", "cuda", "cpu", "mps"],
        help="Device for inference",
    )
    parser.add_argument(
        "--keypoint-threshold",
        type=float,
        help="Keypoint confidence threshold for visualization",
    )

    # Flags
    parser.add_argument(
        "--no-video",
        action="store_true",
        help="Skip overlay video output",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show live preview window (video mode)",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Load configuration
    raw_config = load_raw_config(args.config)
    config = config_from_dict(raw_config)
    paths = raw_config.get("paths", {})
    processing = raw_config.get("processing", {})

    # CLI overrides config
    if args.device:
        config = replace(config, runtime=replace(config.runtime, device=args.device))
    if args.keypoint_threshold is not None:
        config = replace(
            config, overlay=replace(config.overlay, keypoint_threshold=args.keypoint_threshold)
        )

    work_dir = args.work_dir or resolve_path(paths.get("work_dir"), PROJECT_ROOT) or PROJECT_ROOT / "resource"
    output_dir = args.output_dir or resolve_path(paths.get("output_root"), PROJECT_ROOT) or PROJECT_ROOT / "data" / "output"
    num_threads = args.num_threads or config.runtime.num_threads
    frame_stride = args.stride or processing.get("frame_stride", 1)
    if frame_stride < 1:
        print(f"[ERROR] frame_stride must be >= 1, got {frame_stride}", file=sys.stderr)
        sys.exit(1)

    if args.video and not args.video.exists():
        print(f"[ERROR] Video not found: {args.video}", file=sys.stderr)
        sys.exit(1)

    # Print configuration
    if not args.quiet:
        print("=" * 60)
        print("MoveNet Pose Estimation")
        print("=" * 60)
        print(f"[CONFIG] Mode: {'Video' if args.video else 'Camera'}")
        print(f"[CONFIG] Work dir: {work_dir}")
        print(f"[CONFIG] Model: {config.model.model_filename}")
        print(f"[CONFIG] Threads: {num_threads}")
        print(f"[CONFIG] Device: {config.runtime.device}")
        print(f"[CONFIG] Keypoint threshold: {config.overlay.keypoint_threshold}")
        print("-" * 60)

    processor = ImageProcessor(config)
    try:
        processor.initialize(InputParam(work_dir=work_dir, num_threads=num_threads))
    except (PoseEstimationError, ValueError) as e:
        print(f"[ERROR] Initialization failed: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.camera is not None:
            stats = run_live_loop(args.camera, processor)
        elif args.show:
            stats = run_live_loop(args.video, processor)
        else:
            output_jsonl = output_dir / f"{args.video.stem}.jsonl"
            output_video = None if args.no_video else output_dir / f"{args.video.stem}.mp4"
            if not args.quiet:
                print(f"[INFO] Processing: {args.video}")
                print(f"[INFO] Output JSONL: {output_jsonl}")
                if output_video is not None:
                    print(f"[INFO] Output Video: {output_video}")
            stats = run_pose_pipeline(
                video_path=args.video,
                output_jsonl=output_jsonl,
                output_video=output_video,
                processor=processor,
                frame_stride=frame_stride,
                show_progress=not args.quiet,
            )
    finally:
        processor.finalize()

    # Final summary
    if not args.quiet:
        print("=" * 60)
        print("[SUMMARY] Pipeline completed")
        for key, value in stats.items():
            if isinstance(value, float):
                print(f"  {key}: {value:.2f}")
            else:
                print(f"  {key}: {value}")
        print("=" * 60)


if __name__ == "__main__":
    main()
