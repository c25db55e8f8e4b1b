"""Read-side graph handle over a vertex table and an edge table."""
