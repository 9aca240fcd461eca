"""Prediction strategies for simulated matches."""

from .baseline_cautious import CautiousBot
from .baseline_proportional import ProportionalBot
from .random_bot import RandomBot

__all__ = ["CautiousBot", "ProportionalBot", "RandomBot"]
