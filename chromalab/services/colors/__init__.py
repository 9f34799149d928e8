"""
ChromaLab Colors Module

Color conversion, parsing, naming, contrast, CIEDE2000 distance, k-means
palette extraction, brand palette analysis, gradient mapping, vision
deficiency simulation, harmonies and UI design tokens.
"""

__version__ = "1.0.0"
