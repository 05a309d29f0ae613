"""
Video pose estimation pipeline.

Orchestra lettura dei frame, stima della posa con overlay e scrittura degli output.
"""

import logging
from pathlib import Path
from typing import Any

import cv2
from tqdm import tqdm

from ..errors import InferenceError, InvalidInputError
from ..io.jsonl_writer import JsonlWriter, create_pose_record, keypoints_to_list
from ..io.video_reader import VideoReader
from ..io.video_writer import VideoWriter
from ..pose.decode import denormalize_keypoints
from ..timing import TimingStats
from .image_processor import ImageProcessor

logger = logging.getLogger(__name__)


def run_pose_pipeline(
    video_path: str | Path,
    output_jsonl: str | Path,
    output_video: str | Path | None,
    processor: ImageProcessor,
    frame_stride: int = 1,
    show_progress: bool = True,
) -> dict[str, Any]:
    """
    Esegue la stima della posa su tutti i frame di un video.

    Un frame che fallisce (InferenceError, InvalidInputError) viene scritto
    senza overlay con status "error" e la pipeline prosegue col frame
    successivo, senza ritentare.

    Args:
        video_path: Percorso del file video di input
        output_jsonl: Percorso del file JSONL di output per i keypoints
        output_video: Percorso del video di output con overlay (None = nessun video)
        processor: ImageProcessor già inizializzato
        frame_stride: Processa ogni N-esimo frame
        show_progress: Mostra la barra di progresso

    Returns:
        Dizionario con le statistiche della pipeline e i tempi medi

    Raises:
        ValueError: frame_stride < 1
    """
    if frame_stride < 1:
        raise ValueError(f"frame_stride must be >= 1, got {frame_stride}")

    video_path = Path(video_path)
    output_jsonl = Path(output_jsonl)

    stats = {
        "frames_total": 0,
        "frames_processed": 0,
        "frames_failed": 0,
    }
    timing = TimingStats()

    with VideoReader(video_path) as reader:
        fps = reader.fps

        # FPS di output regolato sullo stride
        with VideoWriter(output_video, fps / frame_stride) as writer:
            with JsonlWriter(output_jsonl) as jsonl:

                pbar = tqdm(
                    total=reader.frame_count or None,
                    desc="Pose estimation",
                    disable=not show_progress,
                )

                frame_idx = -1
                while True:
                    ret, frame = reader.read_frame()
                    if not ret or frame is None:
                        break
                    frame_idx += 1
                    pbar.update(1)
                    stats["frames_total"] += 1

                    # Salta i frame in base allo stride
                    if frame_idx % frame_stride != 0:
                        continue

                    try:
                        result = processor.process(frame)
                    except (InferenceError, InvalidInputError) as e:
                        logger.warning("Frame %d failed: %s", frame_idx, e)
                        jsonl.write(create_pose_record(
                            frame_idx=frame_idx,
                            fps=fps,
                            status="error",
                            error=str(e),
                        ))
                        writer.write(frame)
                        stats["frames_failed"] += 1
                        continue

                    timing.add(result)
                    stats["frames_processed"] += 1
                    writer.write(frame)

                    keypoints = None
                    body_score = None
                    if result.pose.bodies:
                        body = result.pose.bodies[0]
                        height, width = frame.shape[:2]
                        keypoints_px = denormalize_keypoints(body.keypoint_coords(), width, height)
                        keypoints = keypoints_to_list(body, keypoints_px)
                        body_score = body.score

                    jsonl.write(create_pose_record(
                        frame_idx=frame_idx,
                        fps=fps,
                        keypoints=keypoints,
                        body_score=body_score,
                        timings={
                            "time_pre_process": result.time_pre_process,
                            "time_inference": result.time_inference,
                            "time_post_process": result.time_post_process,
                        },
                    ))

                pbar.close()

    stats.update({f"avg_{k}": v for k, v in timing.averages().items()})
    return stats


def run_live_loop(
    source: int | str | Path,
    processor: ImageProcessor,
    window_name: str = "movenet_pose",
) -> dict[str, Any]:
    """
    Anteprima dal vivo da camera o video: stima, overlay e cv2.imshow.

    Termina con "q"/ESC o alla fine dello stream.

    Returns:
        Dizionario con numero di frame e tempi medi
    """
    timing = TimingStats()
    frames = 0
    try:
        with VideoReader(source) as reader:
            for _, frame in reader.iter_frames():
                frames += 1
                try:
                    result = processor.process(frame)
                    timing.add(result)
                except (InferenceError, InvalidInputError) as e:
                    logger.warning("Frame %d failed: %s", frames - 1, e)

                cv2.imshow(window_name, frame)
                key = cv2.waitKey(1) & 0xFF
                if key in (ord("q"), 27):
                    break
    finally:
        cv2.destroyAllWindows()

    stats = {"frames_total": frames}
    stats.update({f"avg_{k}": v for k, v in timing.averages().items()})
    return stats
