"""
Codestruct: Lightweight structural outlines for source files.

Codestruct recovers a nested tree of program elements (namespaces, classes,
methods, properties, markup nodes, ...) from raw source lines without a
compiler front end, using brace/tag counting and regular expressions:
- C# and Java via brace-depth scope tracking
- JavaScript/TypeScript, including Vue-style options objects
- HTML markup and Vue single-file components

Usage:
    from codestruct.core.outliner import Outliner

    outliner = Outliner()
    elements = outliner.outline_lines(lines, ".cs")
"""

__version__ = "0.1.0"
