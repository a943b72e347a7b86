"""Parse orchestration, import, reporting and progress services."""
