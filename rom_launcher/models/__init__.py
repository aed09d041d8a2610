"""Data models for the ROM launcher."""

from .msu import Msu, MsuType, ShuffleRequest
from .settings import Settings

__all__ = [
    "Msu",
    "MsuType",
    "Settings",
    "ShuffleRequest",
]
