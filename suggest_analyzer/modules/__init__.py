"""Pipeline modules."""
