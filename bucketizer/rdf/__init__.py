"""
RDF module: quad implementations of the engine's collaborators.
"""

from bucketizer.rdf.records import QuadRecordFactory, subject_for
from bucketizer.rdf.path import PropertyPath

__all__ = [
    "QuadRecordFactory",
    "PropertyPath",
    "subject_for",
]
