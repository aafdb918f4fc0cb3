"""User registry loading.

This module reads the source-of-truth list of users and their groups from
a file. Three formats are recognised by extension:

CSV (.csv), header row required, column names case-insensitive:
    email,group
    jane@example.com,Admins
    john@example.com,

YAML (.yaml/.yml), a list of mappings or a mapping with a ``users`` key:
    users:
      - email: jane@example.com
        group: Admins
      - email: john@example.com

JSON (.json), same shapes as YAML.

An empty or missing group means the directory's Default group.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from roster_sync.reconciler.models import ExternalUserRecord

from .errors import RegistryError

logger = logging.getLogger(__name__)


class RegistryReader:
    """Reads ExternalUserRecords from a registry file."""

    CSV_SUFFIXES = {'.csv'}
    YAML_SUFFIXES = {'.yaml', '.yml'}
    JSON_SUFFIXES = {'.json'}

    @classmethod
    def read(cls, registry_path: str) -> List[ExternalUserRecord]:
        """Load the registry at registry_path.

        Args:
            registry_path: Path to a CSV, YAML or JSON registry file

        Returns:
            Registry records in file order

        Raises:
            RegistryError: If the file cannot be read or decoded, has an
                unknown extension, or contains an entry without email
        """
        path = Path(registry_path)
        suffix = path.suffix.lower()

        if suffix not in cls.CSV_SUFFIXES | cls.YAML_SUFFIXES | cls.JSON_SUFFIXES:
            raise RegistryError(
                registry_path,
                f"Unsupported registry format '{suffix or path.name}' "
                f"(expected .csv, .yaml, .yml or .json)"
            )

        try:
            content = path.read_text(encoding='utf-8-sig')
        except FileNotFoundError:
            raise RegistryError(registry_path, "File not found")
        except PermissionError:
            raise RegistryError(registry_path, "Permission denied")
        except UnicodeDecodeError as e:
            raise RegistryError(registry_path, f"Not valid UTF-8: {e}")
        except OSError as e:
            raise RegistryError(registry_path, f"Cannot read file: {e}")

        if suffix in cls.CSV_SUFFIXES:
            entries = cls._parse_csv(registry_path, content)
        elif suffix in cls.YAML_SUFFIXES:
            try:
                entries = cls._unwrap(registry_path, yaml.safe_load(content))
            except yaml.YAMLError as e:
                raise RegistryError(registry_path, f"Invalid YAML: {e}")
        else:
            try:
                entries = cls._unwrap(registry_path, json.loads(content))
            except json.JSONDecodeError as e:
                raise RegistryError(registry_path, f"Invalid JSON: {e}")

        records = [
            cls._to_record(registry_path, index, entry)
            for index, entry in enumerate(entries, start=1)
        ]
        logger.info(f"Read {len(records)} registry record(s) from {registry_path}")
        return records

    @staticmethod
    def _parse_csv(source: str, content: str) -> List[Dict[str, Any]]:
        reader = csv.DictReader(content.splitlines())
        if not reader.fieldnames:
            return []

        fields = {name.strip().lower(): name for name in reader.fieldnames if name}
        if 'email' not in fields:
            raise RegistryError(source, "CSV header must contain an 'email' column")

        entries = []
        for row in reader:
            entries.append({
                'email': row.get(fields['email']),
                'group': row.get(fields['group']) if 'group' in fields else None,
            })
        return entries

    @staticmethod
    def _unwrap(source: str, data: Any) -> List[Any]:
        if data is None:
            return []
        if isinstance(data, dict):
            data = data.get('users')
        if not isinstance(data, list):
            raise RegistryError(source, "Expected a list of users or a 'users' key")
        return data

    @staticmethod
    def _to_record(source: str, index: int, entry: Any) -> ExternalUserRecord:
        if not isinstance(entry, dict):
            raise RegistryError(source, f"Expected a mapping, got {type(entry).__name__}", row=index)

        email = str(entry.get('email') or '').strip()
        if not email:
            raise RegistryError(source, "Missing email", row=index)

        group = entry.get('group')
        return ExternalUserRecord(email=email, group=str(group).strip() if group else "")
