"""Shared fixtures for the dynamic view tests."""

import pytest
from rdflib import Graph, Namespace

EX = Namespace("http://example.org/")


def _make_graph(base=None):
    # SimpleMemory keeps insertion order, so enumeration order is testable
    graph = Graph(store="SimpleMemory", base=base, bind_namespaces="none")
    graph.bind("ex", EX)
    return graph


@pytest.fixture
def graph():
    """Empty graph with only the `ex` prefix bound."""
    return _make_graph()


@pytest.fixture
def based_graph():
    """Empty graph whose base IRI is the `ex` namespace."""
    return _make_graph(base=str(EX))
