from .service import TraversalService

__all__ = ["TraversalService"]
