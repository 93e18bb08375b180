"""
Employee Service Package.

REST facade over the mock employee API: CRUD-style endpoints, name search and
salary aggregations, with retries on transient upstream failures.
"""

__version__ = "1.0.0"
