"""CI platform adapters."""

from __future__ import annotations

from .provider import CiPlatform, CiPlatformProvider, detect_platform

__all__ = ["CiPlatform", "CiPlatformProvider", "detect_platform"]
