from .in_memory_adapters import InMemoryEsaSource, InMemoryTargetCms

__all__ = ["InMemoryEsaSource", "InMemoryTargetCms"]
