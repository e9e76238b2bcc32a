"""API modules, one package per resource."""
