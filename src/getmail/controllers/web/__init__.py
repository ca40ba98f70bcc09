"""HTML controllers, forms, and kida templates for the browser UI."""
