"""Infrastructure layer — the directory-vault corpus manager and its link index."""
