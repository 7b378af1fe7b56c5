from kubecatalog.infrastructure.output.writer import EntityWriter, OutputFormat

__all__ = ["EntityWriter", "OutputFormat"]
