"""
High-level use cases for the gallery.

Routers and scripts call these services instead of manipulating the JSON
document or the uploads directory directly.
"""
