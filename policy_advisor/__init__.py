"""HR policy advisor: question answering over uploaded policy documents."""

__version__ = "0.1.0"
