"""
Operation mixins composed into the concrete `StridedTensor`.

- ``TensorMixinArithmetic``  elementwise ``+ - * /`` (tensor and scalar)
- ``TensorMixinStructure``   reshape / transpose / squeeze / contiguous
- ``TensorMixinMatmul``      2-D and batched 3-D matrix products
- ``TensorMixinUnary``       relu / sigmoid / exp / sqrt / neg / map
- ``TensorMixinComparison``  elementwise > < >= <= as 0/1 masks

The mixins never import the concrete tensor class; they construct results
through the host's ``_from_array`` and ``_from_storage`` classmethods.
"""

from ._arithmetic import TensorMixinArithmetic
from ._comparison import TensorMixinComparison
from ._matmul import TensorMixinMatmul
from ._structure import TensorMixinStructure
from ._unary import TensorMixinUnary

__all__ = [
    TensorMixinArithmetic.__name__,
    TensorMixinComparison.__name__,
    TensorMixinMatmul.__name__,
    TensorMixinStructure.__name__,
    TensorMixinUnary.__name__,
]
