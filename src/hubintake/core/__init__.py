"""Core module: domain records, errors, interfaces."""
