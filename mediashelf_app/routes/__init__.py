from .lookup_api import lookup_api_bp
from .taxonomy_api import taxonomy_api_bp

__all__ = ['lookup_api_bp', 'taxonomy_api_bp']
