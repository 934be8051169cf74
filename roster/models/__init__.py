"""
Database models for the roster service
Centralizes all SQLAlchemy model imports using factory pattern
"""
from .document import create_document_model


_initialized = {}


def init_models(db):
    """
    Initialize all models with the database instance

    Model classes are built once per database instance; later calls (an app
    factory invoked again in the same process) get the same classes back.

    Args:
        db: SQLAlchemy database instance

    Returns:
        dict: Dictionary containing all model classes
    """
    if id(db) in _initialized:
        return _initialized[id(db)]

    Document = create_document_model(db)

    _initialized[id(db)] = {
        'Document': Document,
    }
    return _initialized[id(db)]


__all__ = [
    'init_models',
    'create_document_model',
    # Model registry exports
    'model_registry',
    'get_models'
]

# Import registry for convenience
from .registry import model_registry, get_models
