"""godseye - movie/TV discovery over the TMDB metadata API."""

__version__ = "0.1.0"
