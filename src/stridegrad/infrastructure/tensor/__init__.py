"""
Strided tensor implementation package.

``StridedTensor`` composes the storage/element-access core defined in
``_tensor`` with the operation mixins under ``mixins``.
"""

from ._tensor import StridedTensor

__all__ = [StridedTensor.__name__]
