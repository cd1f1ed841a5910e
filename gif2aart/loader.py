"""
loader.py

Reads an animated image from a local path or an http(s) URL and decodes
it into raw RasterFrames.

GIFs are walked block by block so every frame keeps its own bounding box,
transparency and disposal code; the LZW pixel data of each frame is
re-wrapped as a one-frame GIF and decoded by Pillow. Anything else Pillow
can open (APNG, WebP, still images) goes through ImageSequence, which
hands back frames that are already composited.
"""

from contextlib import contextmanager
from pathlib import Path
import io
import logging
import struct

import requests
from PIL import Image, ImageSequence

from .errors import DecodeFailure, SourceUnavailable
from .models import Animation, Disposal, RasterFrame

log = logging.getLogger(__name__)

# ---------------- constants ----------------
DEFAULT_TIMEOUT = 30.0
GIF_SIGNATURES = (b"GIF87a", b"GIF89a")

EXTENSION_INTRODUCER = 0x21
IMAGE_SEPARATOR = 0x2C
TRAILER = 0x3B
GRAPHIC_CONTROL_LABEL = 0xF9
APPLICATION_LABEL = 0xFF
LOOP_APPLICATIONS = (b"NETSCAPE2.0", b"ANIMEXTS1.0")

# GIF disposal codes 4-7 are reserved and read as NONE
DISPOSAL_CODES = {
    0: Disposal.NONE,
    1: Disposal.DO_NOT_DISPOSE,
    2: Disposal.RESTORE_BACKGROUND,
    3: Disposal.RESTORE_PREVIOUS,
}


# ---------------- acquisition ----------------
def is_url(source: str) -> bool:
    return source.startswith("http://") or source.startswith("https://")


@contextmanager
def open_source(source: str, timeout: float = DEFAULT_TIMEOUT):
    """Yield a binary stream for `source`; it is closed on every exit path."""
    if is_url(source):
        try:
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise SourceUnavailable(f"failed to fetch URL {source}: {exc}") from exc
        try:
            log.debug("Fetched %s (%d bytes)", source, len(response.content))
            with io.BytesIO(response.content) as stream:
                yield stream
        finally:
            response.close()
        return

    path = Path(source).expanduser()
    try:
        handle = path.open("rb")
    except OSError as exc:
        raise SourceUnavailable(f"failed to open file {path}: {exc}") from exc
    with handle:
        yield handle


def read_source(source: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    with open_source(source, timeout=timeout) as stream:
        try:
            return stream.read()
        except OSError as exc:
            raise SourceUnavailable(f"failed to read {source}: {exc}") from exc


def load_animation(source: str, timeout: float = DEFAULT_TIMEOUT) -> Animation:
    data = read_source(source, timeout=timeout)
    animation = decode_animation(data)
    log.info("Loaded %d frames from %s", len(animation.frames), source)
    return animation


def decode_animation(data: bytes) -> Animation:
    if data[:6] in GIF_SIGNATURES:
        return decode_gif(data)
    return _decode_with_pillow(data)


# ---------------- GIF block walker ----------------
class _ByteReader:
    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.data)

    def take(self, n: int) -> bytes:
        end = self.pos + n
        if end > len(self.data):
            raise DecodeFailure(f"unexpected end of GIF data at offset {self.pos}")
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk

    def byte(self) -> int:
        return self.take(1)[0]

    def u16(self) -> int:
        return struct.unpack("<H", self.take(2))[0]

    def skip_sub_blocks(self) -> bytes:
        """Consume a sub-block chain; returns it raw, size bytes and terminator included."""
        start = self.pos
        while True:
            size = self.byte()
            if size == 0:
                break
            self.take(size)
        return self.data[start:self.pos]

    def sub_block_payloads(self):
        payloads = []
        while True:
            size = self.byte()
            if size == 0:
                return payloads
            payloads.append(self.take(size))


def _color_table(reader, flags):
    return reader.take(3 * (2 << (flags & 0x07)))


def decode_gif(data: bytes) -> Animation:
    reader = _ByteReader(data)
    if reader.take(6) not in GIF_SIGNATURES:
        raise DecodeFailure("not a GIF file")

    screen_w, screen_h = reader.u16(), reader.u16()
    flags = reader.byte()
    reader.take(2)  # background index, pixel aspect
    global_palette = _color_table(reader, flags) if flags & 0x80 else None

    frames = []
    loop_count = -1
    control = None  # (disposal code, delay, transparent index) for the next image

    while not reader.at_end():
        introducer = reader.byte()
        if introducer == TRAILER:
            break
        if introducer == EXTENSION_INTRODUCER:
            label = reader.byte()
            if label == GRAPHIC_CONTROL_LABEL:
                payload = b"".join(reader.sub_block_payloads())
                if len(payload) < 4:
                    raise DecodeFailure("short graphic control extension")
                packed, delay, index = struct.unpack("<BHB", payload[:4])
                control = ((packed >> 2) & 0x07, delay, index if packed & 0x01 else None)
            elif label == APPLICATION_LABEL:
                blocks = reader.sub_block_payloads()
                if (len(blocks) > 1 and blocks[0] in LOOP_APPLICATIONS
                        and len(blocks[1]) >= 3 and blocks[1][0] == 1):
                    loop_count = struct.unpack("<H", blocks[1][1:3])[0]
            else:
                reader.skip_sub_blocks()
        elif introducer == IMAGE_SEPARATOR:
            frames.append(_read_image(reader, global_palette, control, len(frames)))
            control = None
        else:
            raise DecodeFailure(f"unknown GIF block 0x{introducer:02X} at offset {reader.pos - 1}")

    if not frames:
        raise DecodeFailure("GIF contains no image frames")
    log.debug("GIF screen %dx%d, %d frames, loop=%d", screen_w, screen_h, len(frames), loop_count)
    return Animation(frames=frames, loop_count=loop_count, screen_width=screen_w, screen_height=screen_h)


def _read_image(reader, global_palette, control, index) -> RasterFrame:
    left, top, width, height = reader.u16(), reader.u16(), reader.u16(), reader.u16()
    flags = reader.byte()
    palette = _color_table(reader, flags) if flags & 0x80 else global_palette
    if palette is None:
        raise DecodeFailure(f"frame {index} has no color table")
    if width == 0 or height == 0:
        raise DecodeFailure(f"frame {index} has an empty bounding box")
    min_code_size = reader.byte()
    image_data = reader.skip_sub_blocks()

    disposal_code, delay, transparent = control or (0, 0, None)
    image = _decode_pixels(width, height, palette, transparent, bool(flags & 0x40),
                           min_code_size, image_data, index)
    return RasterFrame(
        image=image,
        left=left,
        top=top,
        disposal=DISPOSAL_CODES.get(disposal_code, Disposal.NONE),
        delay=delay,
    )


def _decode_pixels(width, height, palette, transparent, interlaced, min_code_size, image_data, index):
    """Wrap one frame's LZW data as a standalone GIF and let Pillow decode it."""
    size_bits = (len(palette) // 3).bit_length() - 2
    parts = [
        b"GIF89a",
        struct.pack("<HHBBB", width, height, 0x80 | size_bits, 0, 0),
        palette,
    ]
    if transparent is not None:
        parts.append(struct.pack("<BBBBHBB", EXTENSION_INTRODUCER, GRAPHIC_CONTROL_LABEL,
                                 4, 0x01, 0, transparent, 0))
    parts.append(struct.pack("<BHHHHB", IMAGE_SEPARATOR, 0, 0, width, height,
                             0x40 if interlaced else 0))
    parts.append(bytes([min_code_size]))
    parts.append(image_data)
    parts.append(bytes([TRAILER]))

    try:
        with Image.open(io.BytesIO(b"".join(parts))) as im:
            im.load()
            return im.convert("RGBA")
    except (OSError, ValueError, SyntaxError) as exc:
        raise DecodeFailure(f"failed to decode GIF frame {index}: {exc}") from exc


# ---------------- other formats ----------------
def _decode_with_pillow(data: bytes) -> Animation:
    frames = []
    try:
        with Image.open(io.BytesIO(data)) as im:
            loop_count = im.info.get("loop", -1)
            screen_w, screen_h = im.size
            for frame in ImageSequence.Iterator(im):
                duration = frame.info.get("duration") or 0
                # Pillow hands back full composited frames, so each one replaces the last
                frames.append(RasterFrame(
                    image=frame.convert("RGBA"),
                    disposal=Disposal.RESTORE_BACKGROUND,
                    delay=int(duration) // 10,
                ))
    except (OSError, ValueError, SyntaxError) as exc:
        raise DecodeFailure(f"failed to decode image: {exc}") from exc

    if not frames:
        raise DecodeFailure("image contains no frames")
    return Animation(frames=frames, loop_count=loop_count, screen_width=screen_w, screen_height=screen_h)
