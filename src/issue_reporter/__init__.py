"""
Issue reporter: turns diagnostic bug reports into size-bounded Jira tickets.
"""

__version__ = "1.0.0"
