from .numeric import average, clamp

__all__ = ["average", "clamp"]
