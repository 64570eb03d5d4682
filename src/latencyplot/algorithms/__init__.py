"""Algorithms used by latency plot generation.

Pure numpy implementations with no knowledge of series, targets or rendering.
"""
