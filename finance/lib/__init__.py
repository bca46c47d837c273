"""Pure aggregation helpers: no database access, no request objects."""
