"""Client binding for the GitLab project deployments API."""

__version__ = "0.1.0"
