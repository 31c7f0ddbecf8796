from restack.core.background.abc import Background
from restack.core.background.real import ThreadBackground

__all__ = ["Background", "ThreadBackground"]
