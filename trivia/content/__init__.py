"""Quiz content: sheet field schemas, settings resolution and question loading."""
