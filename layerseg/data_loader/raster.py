"""
Raster image container and image file IO.

The segmentation stages work on a flat RGBA byte buffer (row-major, 4 bytes
per pixel) so that every per-pixel buffer in the package shares the same
indexing: ``index = y * width + x``.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union
import numpy as np
from PIL import Image


@dataclass
class RasterImage:
    """
    RGBA raster image.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
        data: Flat uint8 buffer of length width * height * 4 (RGBA).
              Only the RGB channels are read by the pipeline.
    """
    width: int
    height: int
    data: np.ndarray

    @property
    def pixel_count(self) -> int:
        """Number of pixels (width * height)."""
        return self.width * self.height

    @property
    def rgba(self) -> np.ndarray:
        """RGBA view of the buffer, shape (H, W, 4)."""
        return self.data.reshape(self.height, self.width, 4)

    @property
    def rgb(self) -> np.ndarray:
        """RGB view of the buffer, shape (H, W, 3)."""
        return self.rgba[:, :, :3]

    def pixels(self) -> np.ndarray:
        """
        RGB values as a feature matrix.

        Returns:
            pixels: uint8 array of shape (N, 3) where N = width * height
        """
        return self.data.reshape(-1, 4)[:, :3]

    def validate(self) -> 'RasterImage':
        """
        Check the buffer against the declared dimensions.

        The pipeline functions never call this: a mismatched buffer is an
        unchecked precondition there. Call it at the boundary where images
        enter the program.

        Returns:
            self (for method chaining)

        Raises:
            ValueError: If dimensions are negative, the buffer is not uint8,
                        or its length is not width * height * 4
        """
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Image dimensions must be >= 0, got {self.width}x{self.height}"
            )
        if self.data.dtype != np.uint8:
            raise ValueError(f"data must be uint8, got {self.data.dtype}")
        expected = self.width * self.height * 4
        if self.data.ndim != 1 or self.data.size != expected:
            raise ValueError(
                f"data must be a flat buffer of {expected} bytes for a "
                f"{self.width}x{self.height} image, got shape {self.data.shape}"
            )
        return self

    def to_array(self) -> np.ndarray:
        """Copy of the image as an (H, W, 4) uint8 array."""
        return self.rgba.copy()

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'RasterImage':
        """
        Build a RasterImage from an (H, W, 3) or (H, W, 4) array.

        Float arrays with values in [0, 1] are scaled to [0, 255]. A missing
        alpha channel is filled with 255.

        Args:
            array: Image array, RGB or RGBA

        Returns:
            image: Validated RasterImage owning a copy of the data

        Raises:
            ValueError: If the array is not (H, W, 3) or (H, W, 4)
        """
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise ValueError(
                f"array must have shape (H, W, 3) or (H, W, 4), got {array.shape}"
            )

        if np.issubdtype(array.dtype, np.floating) and array.max(initial=0.0) <= 1.0:
            array = np.clip(array * 255.0 + 0.5, 0, 255)
        array = array.astype(np.uint8)

        h, w, c = array.shape
        rgba = np.full((h, w, 4), 255, dtype=np.uint8)
        rgba[:, :, :c] = array

        return cls(width=w, height=h, data=rgba.reshape(-1)).validate()

    @classmethod
    def blank(cls, width: int, height: int) -> 'RasterImage':
        """Opaque black image."""
        data = np.zeros(width * height * 4, dtype=np.uint8)
        data[3::4] = 255
        return cls(width=width, height=height, data=data)


def load_image(path: Union[str, Path]) -> RasterImage:
    """
    Load an image file as RGBA.

    Args:
        path: Path to any format Pillow can read

    Returns:
        image: RasterImage with the file's pixels

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Image file does not exist: {path}")

    with Image.open(path) as img:
        rgba = np.asarray(img.convert('RGBA'), dtype=np.uint8)

    return RasterImage.from_array(rgba)


def save_image(image: RasterImage, path: Union[str, Path]) -> Path:
    """
    Write a RasterImage to disk (format from the file extension).

    Formats without alpha support (e.g. JPEG) receive the RGB channels only.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    pil_img = Image.fromarray(image.to_array(), mode='RGBA')
    if path.suffix.lower() in ('.jpg', '.jpeg', '.bmp'):
        pil_img = pil_img.convert('RGB')
    pil_img.save(path)

    return path
