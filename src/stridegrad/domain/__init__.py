"""
Backend-agnostic contracts: error taxonomy, tensor/optimizer protocols and
graph node vocabulary.
"""
