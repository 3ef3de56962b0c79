"""
Content Type Change

Migrates a content item of a headless CMS project from one content type to
another while keeping its data and publishing state.

Supports:
- Explicit element mappings (target element -> source element)
- Every language variant of the item, not just the requested one
- Published, Archived, Draft and custom workflow steps
- Per-request API call and timing statistics
- Listing candidate types with snippet elements expanded
"""

__version__ = "0.1.0"
