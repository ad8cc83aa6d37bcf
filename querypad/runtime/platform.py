"""Operating system integration.

One implementation is picked at startup by ``detect_platform``; everything
else only talks to ``PlatformIntegration``.
"""

import os
import subprocess
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

import structlog

logger = structlog.get_logger(__name__)


class PlatformIntegration(ABC):
    """Capabilities that differ between desktop platforms."""

    name: str = "generic"
    uses_native_menu_bar: bool = False
    modifier_label: str = "Ctrl"

    def format_keystroke(self, keystroke: Optional[str]) -> str:
        """Render a prompt_toolkit style keystroke such as ``c-p`` for display."""
        if not keystroke:
            return ""
        parts = []
        for chunk in keystroke.split():
            if chunk.startswith("c-"):
                parts.append(f"{self.modifier_label}+{chunk[2:].upper()}")
            elif chunk.startswith("s-"):
                parts.append(f"Shift+{chunk[2:].upper()}")
            elif chunk == "escape":
                parts.append("Alt+" if self.name != "mac" else "Option+")
            else:
                parts.append(chunk.upper())
        return " ".join(parts).replace("+ ", "+")

    @abstractmethod
    def open_path(self, path: Union[str, Path]) -> None:
        """Open a file or folder with the desktop's default handler."""


class MacPlatform(PlatformIntegration):
    name = "mac"
    uses_native_menu_bar = True
    modifier_label = "Cmd"

    def open_path(self, path: Union[str, Path]) -> None:
        subprocess.run(["open", str(path)], check=False)


class WindowsPlatform(PlatformIntegration):
    name = "windows"

    def open_path(self, path: Union[str, Path]) -> None:
        os.startfile(str(path))  # type: ignore[attr-defined]


class DefaultPlatform(PlatformIntegration):
    name = "generic"

    def open_path(self, path: Union[str, Path]) -> None:
        try:
            subprocess.run(["xdg-open", str(path)], check=False)
        except FileNotFoundError:
            logger.warning("platform.open.unavailable", path=str(path))


def detect_platform(system: Optional[str] = None) -> PlatformIntegration:
    system = sys.platform if system is None else system
    if system == "darwin":
        return MacPlatform()
    if system.startswith("win"):
        return WindowsPlatform()
    return DefaultPlatform()
