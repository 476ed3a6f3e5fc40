"""In-memory persistence.

Learn: The store is a plain map per entity kind. There is no durability,
no eviction and no cross-process consistency. Swapping in a real database
means reimplementing MemoryStore's async methods, nothing else.
"""
