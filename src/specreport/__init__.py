"""specreport: static HTML reports and a search index from test suite results."""

__version__ = "0.1.0"
