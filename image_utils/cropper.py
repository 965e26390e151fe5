from dataclasses import dataclass

from PIL import Image

from image_utils.grid import TileRect


@dataclass
class Tile:
    """
    One grid cell, cut out and ready to be written.
    """
    rect: TileRect
    image: Image.Image


def crop(image: Image.Image, rect: TileRect) -> Image.Image:
    """
    Cuts `rect` out of `image`.
    The result owns its pixels; changing it never touches the source.
    """
    width, height = image.size
    if rect.x + rect.width > width or rect.y + rect.height > height:
        raise ValueError(f"Tile {rect} is outside a {width}x{height} image")

    tile = image.crop(rect.box)
    tile.load()
    return tile

