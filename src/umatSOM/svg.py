## Serialization of the U-matrix polygons into an SVG document

import os
import tempfile
import xml.etree.ElementTree as ET

from .errors import WriteFailureError


def polygon_points(points) -> str:
    """Format a sequence of (x, y) pairs as an SVG points attribute."""
    return " ".join(f"{x:f},{y:f}" for x, y in points)


def polygon_style(intensity: int) -> str:
    """Grey fill with the given intensity on all channels, thin black stroke."""
    return (
        f"fill:rgb({intensity},{intensity},{intensity});"
        "stroke:black;stroke-width:1"
    )


def _number(value) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def build_document(title: str, width: float, height: float, polygons) -> str:
    """
    Build the U-matrix document: a title heading followed by the SVG canvas.

    Args:
            title (str): Text of the title heading.
            width (float): Canvas width.
            height (float): Canvas height.
            polygons (list[tuple[list, int]]): (points, intensity) for each unit, in unit order.

    Returns:
            str: the serialized document
    """
    h1 = ET.Element("h1")
    h1.text = title

    svg = ET.Element("svg", {"width": _number(width), "height": _number(height)})
    for points, intensity in polygons:
        ET.SubElement(
            svg,
            "polygon",
            {"points": polygon_points(points), "style": polygon_style(intensity)},
        )

    return (
        ET.tostring(h1, encoding="unicode")
        + "\n"
        + ET.tostring(svg, encoding="unicode")
        + "\n"
    )


def _write_path(document: str, path):
    # write next to the target and move it into place, so the path holds
    # either the whole document or whatever was there before
    path = os.fspath(path)
    fd, tmp_path = tempfile.mkstemp(
        dir=os.path.dirname(os.path.abspath(path)), suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(document)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def write_document(document: str, sink):
    """
    Write a finished document to a text stream or to a file path.

    Args:
            document (str): The serialized document.
            sink (io.TextIOBase | str | os.PathLike): Where to write. A path is only
                replaced once the whole document is on disk.

    Raises:
            WriteFailureError: If the sink rejects the write.
    """
    try:
        if isinstance(sink, (str, os.PathLike)):
            _write_path(document, sink)
        else:
            sink.write(document)
            flush = getattr(sink, "flush", None)
            if flush is not None:
                flush()
    except (OSError, ValueError, TypeError) as err:
        raise WriteFailureError(f"could not write U-matrix document: {err}") from err
