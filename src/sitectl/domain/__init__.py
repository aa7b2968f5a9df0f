"""Domain layer — the content-type, frontmatter, template and link engine.

Every function here is pure: inputs arrive as explicit arguments and new
values are returned. This layer depends only on stdlib and pydantic and
must never import from services, infrastructure, commands, or config.
"""
