"""Application services that own editing state."""
