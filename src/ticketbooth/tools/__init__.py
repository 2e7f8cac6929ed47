"""UI-facing tool functions returning plain result dicts."""
