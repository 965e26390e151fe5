from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from image_utils.errors import DecodeError, EncodeError


@dataclass(frozen=True)
class SourceImage:
    """
    A decoded source file, owned by the task that opened it.
    """
    path: Path
    image: Image.Image
    format: str
    extension: str

    @property
    def width(self) -> int:
        return self.image.size[0]

    @property
    def height(self) -> int:
        return self.image.size[1]

    @property
    def stem(self) -> str:
        return self.path.stem


def format_for_path(path: Path):
    """
    Looks up the Pillow format registered for the file extension.
    Returns None for unknown extensions.
    """
    return Image.registered_extensions().get(path.suffix.lower())


def decode_image(path) -> SourceImage:
    """
    Opens and fully loads an image file.

    Raises:
        DecodeError: if the file can't be read, isn't an image, or has no
            format Pillow can write back.
    """
    path = Path(path)

    try:
        with Image.open(path) as img:
            img.load()
            detected = img.format
            # load() keeps the pixels, the file handle can go
            image = img.copy()
    except UnidentifiedImageError as exc:
        raise DecodeError(f"Not an image: {path}") from exc
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"Failed to decode {path}: {exc}") from exc

    fmt = format_for_path(path)
    if fmt is not None:
        extension = path.suffix.lower().lstrip(".")
    elif detected:
        fmt = detected
        extension = detected.lower()
    else:
        raise DecodeError(f"Unknown image format: {path}")

    if fmt not in Image.SAVE:
        raise DecodeError(f"Format {fmt} can't be written: {path}")

    return SourceImage(path=path, image=image, format=fmt, extension=extension)


def encode_image(image: Image.Image, fmt: str, path) -> None:
    """
    Writes `image` to `path` in format `fmt`.

    Raises:
        EncodeError: if Pillow or the filesystem refuses the write.
    """
    try:
        image.save(path, format=fmt)
    except (OSError, ValueError, KeyError, SystemError) as exc:
        raise EncodeError(f"Failed to save image {Path(path).stem}: {exc}") from exc
