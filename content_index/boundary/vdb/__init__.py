"""
Vector database boundary.

VectorStore interface, its three backends and the factory that picks one.
"""

from content_index.boundary.vdb.device_store import DeviceVectorStore
from content_index.boundary.vdb.in_memory_store import InMemoryVectorStore
from content_index.boundary.vdb.key_value_store import KeyValueVectorStore
from content_index.boundary.vdb.vector_store import VectorStore
from content_index.boundary.vdb.vector_store_factory import create_vector_store

__all__ = [
    "VectorStore",
    "InMemoryVectorStore",
    "KeyValueVectorStore",
    "DeviceVectorStore",
    "create_vector_store",
]
