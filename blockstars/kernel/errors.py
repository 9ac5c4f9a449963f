class BlockStarsError(Exception):
    """Base class for every error raised by the kernel."""


class MalformedHashError(BlockStarsError, ValueError):
    """Block hash is not hexadecimal or has fewer than 16 hex characters."""


class DegenerateTopologyError(BlockStarsError, RuntimeError):
    """Skip-walk did not return to vertex 0 within its step bound."""


class SceneNotReadyError(BlockStarsError, LookupError):
    """Metadata or scene requested before any block was derived."""
