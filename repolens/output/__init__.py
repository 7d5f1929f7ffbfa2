from repolens.output.writer import MarkdownWriter, file_docs_filename, readme_filename, safe_title

__all__ = ["MarkdownWriter", "file_docs_filename", "readme_filename", "safe_title"]
