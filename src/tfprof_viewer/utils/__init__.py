"""Utility modules for tfprof-viewer."""
