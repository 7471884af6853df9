from .txt_exporter import TextExporter

__all__ = ['TextExporter']
