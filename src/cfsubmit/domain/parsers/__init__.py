"""Parsers for local inputs."""

from .filename_parser import FilenameParser, parse_problem_filename

__all__ = ["FilenameParser", "parse_problem_filename"]
