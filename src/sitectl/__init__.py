"""sitectl — authoring companion for static-site Markdown content."""

__version__ = "0.4.0"
