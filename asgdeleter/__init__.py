"""AWS auto scaling resource deleter.

Enumerates, resolves and deletes auto scaling groups, launch configurations
and the IAM instance profiles they reference.
"""

__version__ = "0.1.0"
