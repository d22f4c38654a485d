import logging
import math

import numpy as np
from PIL import Image
from sklearn.cluster import KMeans

from ..color import create_color

logger = logging.getLogger(__name__)


def extract_colors(image_path, n_colors=8):
    """Extract dominant colors using k-means clustering"""
    img = Image.open(image_path).convert("RGB")
    img.thumbnail((300, 300))
    pixels = np.array(img).reshape(-1, 3)

    # Remove extreme pixels
    mask = (pixels.sum(axis=1) > 30) & (pixels.sum(axis=1) < 735)
    filtered_pixels = pixels[mask]

    if len(filtered_pixels) < n_colors:
        filtered_pixels = pixels

    n_clusters = min(n_colors, len(np.unique(filtered_pixels, axis=0)))
    kmeans = KMeans(n_clusters=n_clusters, random_state=42, n_init=10)
    kmeans.fit(filtered_pixels)

    colors = []
    for center in kmeans.cluster_centers_:
        r, g, b = (int(round(c)) for c in center)
        colors.append(create_color(r, g, b))

    logger.debug(
        "Extracted %d colors from %s: %s",
        len(colors),
        image_path,
        ", ".join(c.hex for c in colors),
    )
    return colors


def extract_base_color(image_path, n_colors=8):
    """Pick a palette seed from an image.

    Args:
        image_path: Path to the source image
        n_colors: Number of clusters to look for

    Returns:
        Color: The most chromatic cluster centre (by Oklab chroma)
    """
    colors = extract_colors(image_path, n_colors=n_colors)
    return max(colors, key=lambda c: math.hypot(c.oklab[1], c.oklab[2]))
