"""
Ship services: validation, filter specifications and the ship service.

Import from the submodules directly; this package keeps no re-exports so
the storage layer can depend on the filter module without a cycle.
"""
