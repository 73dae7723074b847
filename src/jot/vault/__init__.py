"""Vault note format: frontmatter, comment sections, filenames and URLs."""
