"""manualref: lexical retrieval and citation resolution over reference manuals."""

__version__ = "0.1.0"
