"""Students CRUD API."""
