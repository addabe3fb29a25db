"""
Response parsing for the Clickatell HTTP API.

The gateway answers with plain text, one record per line, each record made
of ``Key: value`` fields, e.g. ``ID: 6ed5b9a3 To: 27999112345``.
"""

import re
from typing import Dict, List, Union

from .errors import ClickatellError

# A field runs from "Key:" up to the next "Key:" or the end of the line
FIELD_PATTERN = re.compile(r'[A-Za-z0-9]+:.*?(?:(?=[A-Za-z0-9]+:)|$)')

Record = Dict[str, str]


def parse_line(line: str) -> Record:
    record = {}
    for field in FIELD_PATTERN.findall(line):
        key, _, value = field.partition(':')
        record[key.strip()] = value.strip()
    return record


def parse_response(body: str) -> Union[Record, List[Record]]:
    """
    Parse a response body into a record, or a list of records for batch sends.

    Raises:
        ClickatellError: if the body carries an ERR line
    """
    if 'ERR' in body:
        raise ClickatellError.parse(body)

    results = [parse_line(line) for line in body.splitlines() if line.strip()]
    if len(results) == 1:
        return results[0]
    return results
