"""
tfprof viewer - viewport and aggregation engine for Taskflow profiler traces.
"""

__version__ = "0.1.0"
