"""
Offline renderer for exporting the landing background as a video loop.
"""

import logging
import subprocess
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

from PIL import Image
from tqdm import tqdm

from ..hosts import OffscreenHost
from .scene_renderer import AnimatedSceneRenderer

logger = logging.getLogger(__name__)


class OfflineRenderer:
    """
    Renders the animated background frame by frame on an offscreen host.

    Time advances by exactly 1/fps per frame, so exports are reproducible.
    """

    def __init__(self, width: int = 1920, height: int = 1080,
                 samples: int = 4, start_time: float = 0.0,
                 host: Optional[OffscreenHost] = None):
        """
        Initialize offline renderer.

        Args:
            width: Video width
            height: Video height
            samples: Multisample count
            start_time: Value of the time uniform on the first frame
            host: Offscreen host to render on (default: standalone context)
        """
        self.width = width
        self.height = height
        self.samples = samples
        self.start_time = start_time
        self.host = host if host is not None else OffscreenHost(width, height)
        self._time = start_time

    def _clock(self) -> float:
        return self._time

    def render_frames(self, output_dir: Path, frame_count: int, fps: int = 30) -> List[Path]:
        """
        Render frames to PNG files.

        Args:
            output_dir: Directory for frame_%06d.png files
            frame_count: Number of frames
            fps: Frame rate (sets the time step)

        Returns:
            Paths of the written frames
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        self._time = self.start_time

        renderer = AnimatedSceneRenderer(self.host, samples=self.samples, clock=self._clock)
        paths = []
        try:
            # Mounting renders frame 0
            renderer.mount()
            for frame_idx in tqdm(range(frame_count), desc="Rendering frames", unit="frame"):
                if frame_idx > 0:
                    self._time += 1.0 / fps
                    self.host.pump()

                pixels = renderer.engine.read_pixels()
                frame_path = output_dir / f"frame_{frame_idx:06d}.png"
                Image.fromarray(pixels).save(frame_path)
                paths.append(frame_path)
        finally:
            renderer.unmount()

        return paths

    def render_animation(self, output_path: str, fps: int = 30, duration: float = 10.0,
                         frames_only: bool = False) -> Path:
        """
        Render the background to a video file.

        Args:
            output_path: Output video file (or frame directory with frames_only)
            fps: Frame rate
            duration: Duration in seconds
            frames_only: Write PNG frames to output_path and skip encoding

        Returns:
            Path of the video (or frame directory)
        """
        frame_count = max(1, int(duration * fps))
        output_path = Path(output_path)

        if frames_only:
            self.render_frames(output_path, frame_count, fps)
            logger.info("Frames saved to: %s", output_path)
            return output_path

        ffmpeg_path = shutil.which("ffmpeg")
        if ffmpeg_path is None:
            raise RuntimeError(
                "FFmpeg is not installed or not in PATH. "
                "Please install FFmpeg to encode videos.\n"
                "Installation: https://ffmpeg.org/download.html"
            )

        with tempfile.TemporaryDirectory() as temp_dir:
            temp_path = Path(temp_dir)
            logger.info("Rendering %d frames...", frame_count)
            self.render_frames(temp_path, frame_count, fps)

            logger.info("Encoding video...")
            cmd = [
                ffmpeg_path, "-y",
                "-framerate", str(fps),
                "-i", str(temp_path / "frame_%06d.png"),
                "-c:v", "libx264",
                "-preset", "slow",
                "-crf", "22",
                "-pix_fmt", "yuv420p",
                str(output_path)
            ]

            result = subprocess.run(cmd, capture_output=True, text=True)
            if result.returncode != 0:
                logger.error("FFmpeg error: %s", result.stderr)
                raise RuntimeError("Video encoding failed")

        logger.info("Video saved to: %s", output_path)
        return output_path
