"""Application layer: orchestration services over core and boundary."""
