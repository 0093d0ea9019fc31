"""DiffLens: unified diff generation from in-memory file contents."""

from difflens.diff.render import generate_file_diff, render_unified_diff
from difflens.errors import DiffLensError, NoChangesFoundError
from difflens.generation.orchestrator import DiffOrchestrator, generate_diff

__version__ = "0.3.0"

__all__ = [
    "DiffLensError",
    "DiffOrchestrator",
    "NoChangesFoundError",
    "generate_diff",
    "generate_file_diff",
    "render_unified_diff",
]
