"""
Parser for the models2pathways.tsv file published by BioModels.

Each line is ``<BioModels id>\\t<pathway stable id>``. Lines that do not
follow this shape are skipped with a warning; they never stop the run.
"""
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .errors import ConfigurationError, MalformedInputWarning
from .utils.logger import app_logger

BIOMODELS_ID_PREFIX = "BIOMD"
STABLE_ID_PATTERN = re.compile(r"R-\w{3}-\d+")

logger = app_logger.bind(component="models_tsv_parser")


def is_biomodels_id(value: str) -> bool:
    return value.startswith(BIOMODELS_ID_PREFIX)


def is_stable_id(value: str) -> bool:
    return STABLE_ID_PATTERN.fullmatch(value) is not None


def decode_line(raw_line: bytes, line_number: int) -> str:
    try:
        return raw_line.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedInputWarning(line_number, "is not valid UTF-8") from e


def parse_line(line: str, line_number: int) -> Tuple[str, str]:
    """Split one line into (biomodels id, pathway stable id) or raise MalformedInputWarning."""
    fields = [field.strip() for field in line.split("\t")]
    if len(fields) < 2:
        raise MalformedInputWarning(line_number, "has fewer than two tab-separated fields")

    biomodels_id, pathway_stable_id = fields[0], fields[1]
    if not is_biomodels_id(biomodels_id):
        raise MalformedInputWarning(line_number, f"has improperly formatted BioModels ID {biomodels_id!r}")
    if not is_stable_id(pathway_stable_id):
        raise MalformedInputWarning(line_number, f"has improperly formatted Stable ID {pathway_stable_id!r}")

    return biomodels_id, pathway_stable_id


def parse_models_tsv(tsv_file: Optional[str]) -> Dict[str, List[str]]:
    """
    Parse models2pathways.tsv into {pathway stable id: [BioModels ids]}.

    BioModels ids keep their first-seen file order and are de-duplicated per
    pathway, so the list order is stable between runs on the same file.
    """
    pathway_to_biomodels_ids: Dict[str, Dict[str, None]] = {}

    if not tsv_file:
        return {}

    path = Path(tsv_file)
    if not path.is_file():
        raise ConfigurationError(f"Models file not found: {tsv_file}", context={"path": str(path)})

    skipped = 0
    with open(path, "rb") as f:
        for line_number, raw_line in enumerate(f, start=1):
            if not raw_line.strip():
                continue
            try:
                line = decode_line(raw_line, line_number)
                biomodels_id, pathway_stable_id = parse_line(line.rstrip("\r\n"), line_number)
            except MalformedInputWarning as warning:
                logger.warning(str(warning))
                skipped += 1
                continue

            pathway_to_biomodels_ids.setdefault(pathway_stable_id, {})[biomodels_id] = None

    logger.info(
        f"Parsed {len(pathway_to_biomodels_ids)} pathways from {tsv_file} ({skipped} lines skipped)"
    )
    return {
        stable_id: list(biomodels_ids)
        for stable_id, biomodels_ids in pathway_to_biomodels_ids.items()
    }
