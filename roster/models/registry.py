"""
Model Registry - Centralized model access using Flask extension pattern

Usage:
    from roster.models.registry import get_models

    def my_view():
        Document = get_models()['Document']
"""
from flask import current_app
from typing import Dict, Any


class ModelRegistry:
    """
    Flask extension holding the model classes built by init_models()
    """

    def __init__(self, app=None):
        self.models: Dict[str, Any] = {}
        if app:
            self.init_app(app)

    def init_app(self, app):
        app.extensions['models'] = self

    def register(self, models_dict: Dict[str, Any]):
        """
        Register all models with the registry

        Args:
            models_dict: Dictionary mapping model names to model classes
        """
        self.models = models_dict


# Global instance
model_registry = ModelRegistry()


def get_models() -> Dict[str, Any]:
    """
    Helper to get all registered models from current app context

    Raises:
        RuntimeError: If called outside application context
    """
    if 'models' not in current_app.extensions:
        raise RuntimeError(
            "ModelRegistry not initialized. "
            "Ensure model_registry.init_app(app) is called during app setup."
        )

    return current_app.extensions['models'].models
