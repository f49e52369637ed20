"""Utilities for sending ZPL to Zebra printers and previewing labels."""

from __future__ import annotations

import socket
from typing import Optional
from urllib.error import URLError
from urllib.request import Request, urlopen

from flask import current_app


class LabelRenderError(RuntimeError):
    """Raised when the Labelary preview service cannot render a label."""


def send_zpl(zpl: str, host: Optional[str] = None, port: Optional[int] = None) -> bool:
    """Send raw ZPL to a networked Zebra printer.

    Returns ``True`` when the data was written to the printer socket and
    ``False`` when no printer is configured or the connection failed.
    """

    host = host or current_app.config.get("ZEBRA_PRINTER_HOST")
    port = int(port or current_app.config.get("ZEBRA_PRINTER_PORT", 9100))
    if not host:
        current_app.logger.warning("No Zebra printer host configured; label not sent")
        return False

    try:
        with socket.create_connection((host, port), timeout=5) as sock:
            sock.sendall(zpl.encode("utf-8"))
        return True
    except OSError as exc:
        current_app.logger.error("Failed to send ZPL to printer: %s", exc)
        return False


def render_label_png(zpl: str, *, dpi: str = "8dpmm", size: str = "2x1", index: int = 0) -> bytes:
    """Render the first label in ``zpl`` as PNG using the Labelary API."""

    base_url = str(current_app.config.get("LABELARY_BASE_URL", "http://api.labelary.com/v1")).rstrip("/")
    url = f"{base_url}/printers/{dpi}/labels/{size}/{index}/"
    request = Request(url, data=zpl.encode("utf-8"), headers={"Accept": "image/png"})
    try:
        with urlopen(request, timeout=10) as response:
            return response.read()
    except (URLError, OSError) as exc:
        current_app.logger.error("Labelary preview failed: %s", exc)
        raise LabelRenderError(str(exc)) from exc
