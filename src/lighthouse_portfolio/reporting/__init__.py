"""Text rendering of analytics results."""
