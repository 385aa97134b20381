#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Near-Earth Object Feed Reader

Reads a delimited table of near-Earth object orbital elements into body
definitions. Every row is validated on its own: a malformed row is logged
and skipped, the rest of the feed still loads.

Expected columns: name, a, e, q, om, w, i, tp, diameter, gm
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Collection, Iterable, List, Mapping, Union
import csv
import logging

from .body import SUN, BodyDefinition
from .errors import MalformedRecord


logger = logging.getLogger(__name__)

# Column delimiter of the published dataset
DEFAULT_DELIMITER = ";"

NEO_FIELDS = ("name", "a", "e", "q", "om", "w", "i", "tp", "diameter", "gm")


@dataclass
class NeoFeedResult:
    """
    Outcome of reading a feed.

    Attributes
    ----------
    definitions : List[BodyDefinition]
        Bodies built from valid rows, in file order
    rejected : List[MalformedRecord]
        One error per skipped row
    """
    definitions: List[BodyDefinition] = field(default_factory=list)
    rejected: List[MalformedRecord] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return len(self.definitions) + len(self.rejected)


def parse_neo_rows(
    rows: Iterable[Mapping[str, Any]],
    parent: str = SUN,
    first_row: int = 1,
    reserved: Collection[str] = ()
) -> NeoFeedResult:
    """
    Convert feed rows into body definitions.

    Parameters
    ----------
    rows : iterable of mappings
        One mapping per object, keyed by column name
    parent : str
        Body the objects orbit (default "Sun")
    first_row : int
        Row number reported for the first row
    reserved : collection of str
        Names already taken by other bodies; rows reusing them are rejected

    Returns
    -------
    NeoFeedResult
        Valid definitions and rejected rows
    """
    result = NeoFeedResult()
    seen = set(reserved)

    for row_number, row in enumerate(rows, start=first_row):
        try:
            definition = BodyDefinition.from_neo_record(row, parent=parent, row=row_number)
            if definition.name in seen:
                raise MalformedRecord(
                    "duplicate name", row=row_number, name=definition.name
                )
        except MalformedRecord as exc:
            logger.warning(f"Skipping NEO record: {exc}")
            result.rejected.append(exc)
            continue

        seen.add(definition.name)
        result.definitions.append(definition)

    return result


def read_neo_csv(
    path: Union[str, Path],
    delimiter: str = DEFAULT_DELIMITER,
    parent: str = SUN,
    reserved: Collection[str] = ()
) -> NeoFeedResult:
    """
    Read a near-Earth object CSV file.

    Parameters
    ----------
    path : str or Path
        File with a header row
    delimiter : str
        Column delimiter (default ";")
    parent : str
        Body the objects orbit (default "Sun")
    reserved : collection of str
        Names already taken by other bodies

    Returns
    -------
    NeoFeedResult
        Valid definitions and rejected rows

    Raises
    ------
    OSError
        If the file cannot be read
    MalformedRecord
        If the header lacks required columns
    """
    path = Path(path)
    with path.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle, delimiter=delimiter)
        header = [name.strip() for name in (reader.fieldnames or [])]
        missing = [name for name in NEO_FIELDS if name not in header]
        if missing:
            raise MalformedRecord(f"header missing columns {missing}", row=1)
        reader.fieldnames = header
        rows = list(reader)

    result = parse_neo_rows(rows, parent=parent, first_row=2, reserved=reserved)
    logger.info(
        f"Loaded {len(result.definitions)} NEOs from {path} "
        f"({len(result.rejected)} rows rejected)"
    )
    return result
