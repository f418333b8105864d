"""Services: classification, registry fallback, scheduling and run modes."""
