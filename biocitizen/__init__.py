"""BioCitizen: biodiversity index engine for citizen-science observation tables."""

__version__ = "0.1.0"
