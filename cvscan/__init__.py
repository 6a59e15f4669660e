"""
CV Scanner
==========
Deterministic ATS compliance scoring for PDF résumés.

Architecture:
    - Text Extractor: Extracts plain text and reading-order lines from the PDF
    - Page Signal Extractor: Recovers fill colors, fills, shadings, image
      paints and rendered font names from the first pages
    - Visual Detectors: Photo, colored background and template font
    - Structure Analyzer: Template markers, sections, summary, bullets
    - Scoring Aggregator: Folds findings into a capped, clamped score

Version: 1.0.0
"""

__version__ = "1.0.0"
