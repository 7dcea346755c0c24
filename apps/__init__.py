"""Console entry points for the folder audit tools."""
