"""API request/response schemas.

Import from the submodules directly: ``common`` is used by the tool and
worker models that ``requests`` itself depends on.
"""
