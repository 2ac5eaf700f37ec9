"""
gitviz - Git history statistics

This package turns git log output into contributor, commit frequency,
branch and file churn statistics, and prints them as JSON or as
flattened grep-friendly text.
"""

__version__ = '0.1.0'
