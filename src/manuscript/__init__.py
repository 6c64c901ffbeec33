"""Chapter and scene manuscript editing."""
