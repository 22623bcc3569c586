"""Parse TOML HTTP request files and render their placeholders."""

__version__ = "0.1.0"
