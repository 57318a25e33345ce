"""SEO description generator.

Batch pipeline that gathers search-volume and competitor data for a list of
page names and drives an LLM to write brand-compliant descriptions.
"""

__version__ = "0.1.0"
