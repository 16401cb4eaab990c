"""newsfeed — multi-source news aggregation with date normalization."""

__version__ = "1.0.0"
