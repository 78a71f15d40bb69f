"""HTTP service boundary exposing the pure scoring operations."""
