"""
Services package for business logic.

The calendar core (date_grid, span_resolver, absence_overlap,
range_expander, absence_projector) is pure: every function takes
in-memory collections and returns new values. Persistence stays in the
routers.
"""
