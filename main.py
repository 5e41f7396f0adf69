#!/usr/bin/env python3
"""
BioModels Insertion - Entry Point

Links Reactome pathways to their BioModels cross-references as a step of
the Reactome release pipeline.

Usage:
    python main.py insert [config.properties] [models2pathways.tsv] [--person-id N]
    python main.py verify [--cu USER --cp PASS --ch HOST --cP PORT] [--pu ... --pp ... --ph ... --pP ...]
"""

import sys

from biomodels_insertion.cli import main


if __name__ == "__main__":
    sys.exit(main())
