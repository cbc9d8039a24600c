"""Gamification engine and Telegram front end for the BizQuest dashboard."""
from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
