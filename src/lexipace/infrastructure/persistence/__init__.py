# Infrastructure Persistence Package
from .json_store import JsonLearnerStore

__all__ = ["JsonLearnerStore"]
