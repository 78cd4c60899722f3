"""
Container Size Monitor.

Logon-time check that warns the user when the profile or Office data
container is approaching its configured maximum size.
"""

__version__ = "1.0.0"
