"""Point types, small and sparse linear algebra, normal densities and correspondence matching for stereo vision."""

__version__ = "0.1.0"