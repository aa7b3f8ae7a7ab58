"""
Persistence adapters.

Services depend on these modules for reading and writing the collection
instead of touching the JSON file themselves.
"""
