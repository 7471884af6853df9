from .document_store import DocumentStore, Direction, Surfaces, TextSurface
from .persistence import PersistenceManager, with_default_suffix

__all__ = [
    'DocumentStore', 'Direction', 'Surfaces', 'TextSurface',
    'PersistenceManager', 'with_default_suffix',
]
