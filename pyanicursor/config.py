"""
Package defaults and format constants.
Values in the format sections mirror what Windows expects; do not change them.
"""

from __future__ import annotations
import os

# ───────────────────────────────────────────────────────────────────────────────
# Identity
# ───────────────────────────────────────────────────────────────────────────────
APP_NAME = "pyanicursor"
APP_VERSION = "0.1.0"

# ───────────────────────────────────────────────────────────────────────────────
# Profile / timeline defaults
# ───────────────────────────────────────────────────────────────────────────────
DEFAULT_OUTPUT_SIZE = 32
# single-frame sources and frames without a usable delay
DEFAULT_FRAME_DELAY_MS = 100
THUMBNAIL_SIZE = 32

# ───────────────────────────────────────────────────────────────────────────────
# ANI (RIFF / ACON)
# ───────────────────────────────────────────────────────────────────────────────
JIFFY_MS = 1000 / 60                # one display-rate unit
ANI_DEFAULT_DISPLAY_RATE = 60
ANI_HEADER_SIZE = 36
ANI_FLAG_ICON = 1                   # frames are icon/cursor images

# ───────────────────────────────────────────────────────────────────────────────
# CUR / ICO
# ───────────────────────────────────────────────────────────────────────────────
CUR_HEADER_SIZE = 6 + 16            # directory + one entry
PNG_SIGNATURE = b"\x89PNG"

# ───────────────────────────────────────────────────────────────────────────────
# Preview aids (never part of exported output)
# ───────────────────────────────────────────────────────────────────────────────
GUIDE_COLOR = (148, 163, 184, 51)
HOTSPOT_FILL = (239, 68, 68, 255)
HOTSPOT_OUTLINE = (255, 255, 255, 204)
HOTSPOT_RADIUS = 1.5

# ───────────────────────────────────────────────────────────────────────────────
# Logging
# ───────────────────────────────────────────────────────────────────────────────
LOG_FILE = os.getenv("PYANICURSOR_LOG_FILE") or None
LOG_MAX_BYTES = 10_000_000
LOG_BACKUP_COUNT = 5

DEFAULTS = {
    "profile": {
        "output_size": DEFAULT_OUTPUT_SIZE,
        "hotspot": (0, 0),
    },
    "timeline": {
        "frame_delay_ms": DEFAULT_FRAME_DELAY_MS,
    },
    "ani": {
        "display_rate": ANI_DEFAULT_DISPLAY_RATE,
        "flags": ANI_FLAG_ICON,
    },
}
