"""Boundary layer: embedding providers and vector stores."""
