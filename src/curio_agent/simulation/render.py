"""
Animation Rendering
===================

Writes simulation snapshots to an animated GIF with Pillow.

Frame Count:
    Exactly one GIF image block is written per snapshot. Pillow's
    `save_all` merges consecutive identical frames, and an intensity run
    can leave the grid unchanged when a delta is clipped, so frames are
    encoded one by one with `GifImagePlugin.getdata` under a single
    grayscale header from `GifImagePlugin.getheader`.
"""

import logging
from pathlib import Path
from typing import Sequence, Union

import numpy as np
from PIL import GifImagePlugin, Image


logger = logging.getLogger(__name__)

# GIF trailer byte
_TRAILER = b";"


def to_image(frame: np.ndarray, scale: int = 1) -> Image.Image:
    """Convert one (H, W) uint8 snapshot to a grayscale PIL image."""
    image = Image.fromarray(np.asarray(frame, dtype=np.uint8))
    if scale > 1:
        image = image.resize(
            (image.width * scale, image.height * scale),
            resample=Image.Resampling.NEAREST,
        )
    return image


def render_gif(
    frames: Sequence[np.ndarray],
    path: Union[str, Path],
    scale: int = 1,
    duration_ms: int = 0,
) -> Path:
    """
    Save snapshots as a looping animated GIF, one GIF frame per snapshot.

    Args:
        frames: Sequence of (H, W) uint8 snapshots, one per iteration
        path: Output file
        scale: Nearest-neighbor upscaling factor
        duration_ms: Per-frame delay

    Returns:
        The output path
    """
    if not frames:
        raise ValueError("render_gif needs at least one frame")

    path = Path(path)
    images = [to_image(frame, scale) for frame in frames]
    size = images[0].size
    if any(image.size != size for image in images):
        raise ValueError("render_gif needs frames of one size")

    # getheader attaches a grayscale palette to the image it is given
    header, _ = GifImagePlugin.getheader(images[0].copy(), info={"loop": 0})

    with open(path, "wb") as fp:
        for block in header:
            fp.write(block)
        for image in images:
            for block in GifImagePlugin.getdata(image, duration=duration_ms):
                fp.write(block)
        fp.write(_TRAILER)

    logger.info(f"Wrote {len(images)} frames to {path}")
    return path
