"""Insertion of BioModels cross-references into the Reactome graph database."""

__version__ = "1.0.0"
