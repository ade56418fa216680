"""GitHub gist API client used as the remote store."""

from hidesync.core.gist.client import GistClient

__all__ = ["GistClient"]
