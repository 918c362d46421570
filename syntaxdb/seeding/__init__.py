from .base import SeedFixtureProvider, available_providers, get_provider
from .helpers import categorize_function, generate_tags
from .python_fixture import PythonSeedProvider

__all__ = [
    "SeedFixtureProvider",
    "available_providers",
    "get_provider",
    "categorize_function",
    "generate_tags",
    "PythonSeedProvider",
]
