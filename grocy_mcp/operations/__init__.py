"""
Operation modules.

Every sub-package here exports a ``MODULE`` bundle (definitions, handlers
and optional options validators) and is picked up by the module loader.
"""
