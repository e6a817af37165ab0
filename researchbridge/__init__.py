"""ResearchBridge: relative scoring and ranking of researchers and professors."""

__version__ = "0.1.0"
