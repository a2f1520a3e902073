"""NetworkX view of the resolved link index."""
