"""
Image Similarity - Compare message attachments to a reference image

Each image is reduced to a coarse 4x4x4 RGB color histogram; two images
are compared with the Bhattacharyya coefficient (1.0 = identical color
distribution, 0.0 = disjoint).
"""

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import ConfigurationError

BINS_PER_CHANNEL = 4
IMAGE_SUFFIXES = ('.jpg', '.jpeg', '.png', '.gif', '.bmp', '.tif', '.tiff', '.webp')


class ImageHistogram:
    """Normalized RGB histogram of one image"""

    def __init__(self, image: Image.Image, bins: int = BINS_PER_CHANNEL):
        self.bins = bins
        pixels = np.asarray(image.convert('RGB'), dtype=np.uint16).reshape(-1, 3)
        # Map 0-255 to 0..bins-1 per channel, then flatten to one index
        scaled = (pixels * bins) // 256
        index = (scaled[:, 0] * bins + scaled[:, 1]) * bins + scaled[:, 2]
        counts = np.bincount(index, minlength=bins ** 3).astype(float)
        total = counts.sum()
        self.values = counts / total if total else counts

    @classmethod
    def from_bytes(cls, data: bytes) -> "ImageHistogram":
        with Image.open(io.BytesIO(data)) as image:
            return cls(image)

    @classmethod
    def from_path(cls, path: str) -> "ImageHistogram":
        with Image.open(path) as image:
            return cls(image)

    def similarity(self, other: "ImageHistogram") -> float:
        """Bhattacharyya coefficient between the two histograms"""
        return float(np.sum(np.sqrt(self.values * other.values)))


@dataclass
class ImageScore:
    """Best-matching attachment for a message"""
    name: str
    score: float
    size: int


class ImageSimilarityService:
    """Scores message attachments against one reference image"""

    def __init__(self, reference_path: str, threshold: float = 0.8):
        path = Path(reference_path)
        if not path.exists():
            raise ConfigurationError(f"Reference image not found: {path}")
        try:
            self.reference = ImageHistogram.from_path(str(path))
        except (UnidentifiedImageError, OSError) as e:
            raise ConfigurationError(f"Reference image {path} can't be read: {e}")
        self.reference_path = str(path)
        self.threshold = threshold

    def is_similar(self, score: float) -> bool:
        return score >= self.threshold

    def score(self, message) -> Optional[ImageScore]:
        """Highest-scoring image attachment, None if the message has none"""
        best = None
        for name, data in message.attachments.items():
            if not name.lower().endswith(IMAGE_SUFFIXES):
                continue
            try:
                histogram = ImageHistogram.from_bytes(data)
            except (UnidentifiedImageError, OSError):
                print(f"  ⚠ {message.message_id}: attachment '{name}' is not a readable image")
                continue
            candidate = ImageScore(name, self.reference.similarity(histogram), len(data))
            if best is None or candidate.score > best.score:
                best = candidate
        return best
