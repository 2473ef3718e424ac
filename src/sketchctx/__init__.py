"""sketchctx — Sketch context bridge for AI editors."""

__version__ = "0.3.0"
