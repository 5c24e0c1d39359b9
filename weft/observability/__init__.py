from .console import RichConsoleSink, format_arguments, truncate_output

__all__ = ["RichConsoleSink", "format_arguments", "truncate_output"]
