"""Progress counting and report scheduling."""
