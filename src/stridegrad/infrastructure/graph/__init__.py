"""
Computation-graph package.

Importing this package registers the per-operator forward/backward rules
(``_ops``) on `Node`.
"""

from ._node import Node
from ._graph import Graph

__all__ = [Node.__name__, Graph.__name__]
