"""Progress reporters and output formatting."""
