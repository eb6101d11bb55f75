"""Command-line binding for the object gateway."""
