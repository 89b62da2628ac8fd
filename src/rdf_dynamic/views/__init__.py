"""
Dictionary and set views over an rdflib graph.

The views hold no statements: every read and write goes to the graph.
"""

from rdf_dynamic.views.objects import ObjectCollection
from rdf_dynamic.views.subjects import SubjectCollection
from rdf_dynamic.views.node import DynamicNode
from rdf_dynamic.views.graph import DynamicGraph

__all__ = [
    "ObjectCollection",
    "SubjectCollection",
    "DynamicNode",
    "DynamicGraph",
]
