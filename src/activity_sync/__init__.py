"""Activity Sync - resilient incremental sync of GitHub and Jira resources."""

__version__ = "0.1.0"
