"""
Prétraitement des médias avant analyse: redimensionnement d'images,
extraction de frames vidéo, encodage base64.

Le relais ne dépend que de la capacité `MediaPreprocessor`; l'implémentation
par défaut s'appuie sur Pillow (images) et OpenCV (vidéo).
"""
import base64
import io
import logging
import tempfile
from typing import List, Optional, Protocol, Tuple

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from ..core.exceptions import MediaError

logger = logging.getLogger(__name__)


class MediaPreprocessor(Protocol):
    """Capacité de prétraitement consommée par l'analyse image / vidéo."""

    def resize(
        self,
        data: bytes,
        max_width: int,
        max_height: int,
        output_format: Optional[str] = None
    ) -> bytes:
        ...

    def extract_frames(
        self,
        data: bytes,
        interval_seconds: float,
        max_width: int,
        max_height: int
    ) -> List[bytes]:
        ...


def fit_dimensions(width: int, height: int, max_width: int, max_height: int) -> Tuple[int, int]:
    """
    Calcule les dimensions cibles en conservant le ratio.

    Réduit seulement: la largeur est bornée d'abord, puis la hauteur.
    """
    if width <= max_width and height <= max_height:
        return width, height

    aspect_ratio = width / height
    new_width, new_height = float(width), float(height)
    if new_width > max_width:
        new_width = max_width
        new_height = new_width / aspect_ratio
    if new_height > max_height:
        new_height = max_height
        new_width = new_height * aspect_ratio
    return max(1, int(new_width)), max(1, int(new_height))


def to_base64(data: bytes) -> str:
    """Encode des octets en base64 (sans préfixe data URL)."""
    return base64.b64encode(data).decode("ascii")


class PillowMediaPreprocessor:
    """Implémentation Pillow + OpenCV de MediaPreprocessor."""

    def __init__(self, jpeg_quality: int = 90):
        self.jpeg_quality = jpeg_quality

    def resize(
        self,
        data: bytes,
        max_width: int,
        max_height: int,
        output_format: Optional[str] = None
    ) -> bytes:
        """
        Redimensionne une image encodée.

        Args:
            data: Image encodée (JPEG, PNG, ...)
            max_width: Largeur maximale
            max_height: Hauteur maximale
            output_format: Format de sortie Pillow (défaut: format source)

        Returns:
            Image ré-encodée

        Raises:
            MediaError: Image illisible ou encodage impossible
        """
        try:
            with Image.open(io.BytesIO(data)) as source:
                source.load()
                image_format = output_format or source.format or "JPEG"
                target = fit_dimensions(source.width, source.height, max_width, max_height)
                image = source
                if target != source.size:
                    image = source.resize(target, Image.Resampling.LANCZOS)
                if image_format.upper() in ("JPEG", "JPG") and image.mode not in ("RGB", "L"):
                    image = image.convert("RGB")

                output = io.BytesIO()
                save_kwargs = {"quality": self.jpeg_quality} if image_format.upper() == "JPEG" else {}
                image.save(output, format=image_format, **save_kwargs)
        except UnidentifiedImageError as e:
            raise MediaError(f"Erreur de chargement de l'image: {e}", media_type="image") from e
        except (OSError, ValueError, KeyError) as e:
            raise MediaError(f"Échec du redimensionnement de l'image: {e}", media_type="image") from e

        logger.debug(f"[MEDIA] Image {source.size} -> {target} ({image_format})")
        return output.getvalue()

    def extract_frames(
        self,
        data: bytes,
        interval_seconds: float,
        max_width: int,
        max_height: int
    ) -> List[bytes]:
        """
        Extrait une frame JPEG toutes les `interval_seconds` secondes.

        Raises:
            MediaError: Vidéo illisible, durée inconnue ou aucune frame
        """
        if interval_seconds <= 0:
            raise MediaError("L'intervalle entre frames doit être positif", media_type="video")

        frames: List[bytes] = []
        with tempfile.NamedTemporaryFile(suffix=".video") as tmp:
            tmp.write(data)
            tmp.flush()

            capture = cv2.VideoCapture(tmp.name)
            try:
                if not capture.isOpened():
                    raise MediaError("Erreur de chargement de la vidéo", media_type="video")

                fps = capture.get(cv2.CAP_PROP_FPS)
                frame_count = capture.get(cv2.CAP_PROP_FRAME_COUNT)
                if fps <= 0 or frame_count <= 0:
                    raise MediaError("Durée de la vidéo inconnue", media_type="video")
                duration = frame_count / fps

                position = 0.0
                while position < duration:
                    capture.set(cv2.CAP_PROP_POS_MSEC, position * 1000)
                    ok, frame = capture.read()
                    if not ok:
                        break
                    frames.append(self._encode_frame(frame, max_width, max_height))
                    position += interval_seconds
            finally:
                capture.release()

        if not frames:
            raise MediaError("Aucune frame extraite de la vidéo", media_type="video")
        logger.debug(f"[MEDIA] {len(frames)} frame(s) extraite(s), durée {duration:.1f}s")
        return frames

    def _encode_frame(self, frame: np.ndarray, max_width: int, max_height: int) -> bytes:
        height, width = frame.shape[:2]
        target = fit_dimensions(width, height, max_width, max_height)
        if target != (width, height):
            frame = cv2.resize(frame, target, interpolation=cv2.INTER_AREA)
        ok, encoded = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self.jpeg_quality])
        if not ok:
            raise MediaError("Échec de l'encodage JPEG d'une frame", media_type="video")
        return encoded.tobytes()
