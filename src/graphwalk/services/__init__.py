"""Service layer — traversal and generation logic returning ServiceResult.

Services may import from the infrastructure layer.
They must never import from commands or output.
"""
