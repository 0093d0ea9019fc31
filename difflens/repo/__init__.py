from .cache import RepositoryCache
from .git import CommitInfo, GitRepository, git_content_provider, parse_name_status
from .models import ChangeStatus, FileChangeDescriptor
from .provider import ContentProvider, ContentRetrievalChain, RetrievalStrategy

__all__ = [
    "ChangeStatus",
    "FileChangeDescriptor",
    "ContentProvider",
    "ContentRetrievalChain",
    "RetrievalStrategy",
    "GitRepository",
    "CommitInfo",
    "git_content_provider",
    "parse_name_status",
    "RepositoryCache",
]
