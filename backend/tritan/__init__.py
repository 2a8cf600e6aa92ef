"""
Tritan — workflow editor core.

Owns the live workflow graph, validates it through the remote
engine (the "Guardian"), and submits it for execution.
"""
