"""impactscope - structural change impact analysis for Java code."""

__version__ = "0.1.0"
