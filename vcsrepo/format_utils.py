"""
Output format utilities for vcsrepo CLI commands.

Formats package records (or any dicts) as JSONL, JSON, YAML or CSV.
"""

import csv
import io
import json
import os
from typing import Any, Dict, Iterator, List, Optional

import yaml

FORMATS = ('jsonl', 'json', 'yaml', 'csv')


def format_output(data: Iterator[Dict[str, Any]], format: str,
                  fields: Optional[List[str]] = None) -> Iterator[str]:
    """
    Format data according to the specified format.

    Args:
        data: Iterator of dictionaries to format
        format: Output format (jsonl, json, yaml, csv)
        fields: Optional list of fields to include (CSV only)

    Yields:
        Formatted strings for output
    """
    if format == "jsonl":
        for item in data:
            yield json.dumps(item, ensure_ascii=False)
    elif format == "json":
        yield json.dumps(list(data), ensure_ascii=False, indent=2)
    elif format == "yaml":
        yield yaml.safe_dump(list(data), default_flow_style=False, allow_unicode=True, sort_keys=False)
    elif format == "csv":
        yield from format_csv(data, fields)
    else:
        raise ValueError(f"Unknown format: {format}")


def format_csv(data: Iterator[Dict[str, Any]], fields: Optional[List[str]] = None) -> Iterator[str]:
    """Format data as CSV, flattening nested dist/source mappings into dotted columns."""
    rows = [flatten_dict(item) for item in data]
    if not rows:
        return

    if fields is None:
        # name/version first, everything else alphabetically
        seen = {key for row in rows for key in row}
        leading = [f for f in ('name', 'version', 'version_normalized') if f in seen]
        fields = leading + sorted(seen - set(leading))

    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=fields, extrasaction='ignore')
    writer.writeheader()
    writer.writerows(rows)
    yield output.getvalue()


def flatten_dict(d: Dict[str, Any], parent_key: str = '', sep: str = '.') -> Dict[str, Any]:
    """
    Flatten a nested dictionary.

    Example:
        {'source': {'type': 'git'}} -> {'source.type': 'git'}
    """
    items: Dict[str, Any] = {}
    for k, v in d.items():
        new_key = f"{parent_key}{sep}{k}" if parent_key else k
        if isinstance(v, dict):
            items.update(flatten_dict(v, new_key, sep=sep))
        elif isinstance(v, list):
            items[new_key] = ', '.join(str(item) for item in v)
        else:
            items[new_key] = v
    return items


def get_format_from_env(default: str = 'jsonl') -> str:
    """Get output format from the VCSREPO_FORMAT environment variable."""
    format = os.environ.get('VCSREPO_FORMAT', default).lower()
    if format not in FORMATS:
        return default
    return format
