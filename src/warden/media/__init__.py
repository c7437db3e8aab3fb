"""Media handling: category table, validator, upload router, signed URLs."""
