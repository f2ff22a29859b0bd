from .config import DemoConfig, load_config
from .result_store import InMemoryResultStore

__all__ = ["DemoConfig", "load_config", "InMemoryResultStore"]
