"""Application layer: table engine, estimation workflow, health checks."""
