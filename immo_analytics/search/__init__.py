"""Search filter application and region lookup helpers."""
