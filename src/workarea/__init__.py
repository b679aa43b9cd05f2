"""MRB working area conventions."""
