"""HTTP API: search, forum CRUD, health and metrics."""
