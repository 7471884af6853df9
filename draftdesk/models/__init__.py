from .project import Project, Chapter, WikiEntry

__all__ = ['Project', 'Chapter', 'WikiEntry']
