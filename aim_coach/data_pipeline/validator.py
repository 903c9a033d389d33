"""
Payload Validator Module
=======================
Validates attempt rows, reports and export messages against JSON schemas.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import jsonschema
import jsonschema.validators

from .. import DEFAULT_SCHEMA_DIR


class PayloadValidator:
    """
    Validates serialized engine output against bundled schemas.
    """

    SCHEMA_MAP = {
        'attempt': 'attempt_schema.json',
        'report': 'report_schema.json',
        'export': 'export_schema.json'
    }

    def __init__(
        self,
        schema_dir: Optional[Path] = None,
        log_level: str = "INFO"
    ):
        """
        Initialize validator.

        Args:
            schema_dir: Directory containing schema files
            log_level: Logging level
        """
        self.schema_dir = Path(schema_dir) if schema_dir else DEFAULT_SCHEMA_DIR
        self.schemas: Dict[str, dict] = {}
        self._validators: Dict[str, Any] = {}

        # Setup logging
        self.logger = logging.getLogger(self.__class__.__name__)
        self.logger.setLevel(getattr(logging, log_level.upper()))

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            self.logger.addHandler(handler)

        # Load schemas
        self._load_schemas()

    def _load_schemas(self):
        """Load and compile all schema files."""
        for kind, filename in self.SCHEMA_MAP.items():
            filepath = self.schema_dir / filename

            if not filepath.exists():
                self.logger.warning(f"Schema file not found: {filepath}")
                continue

            with open(filepath, 'r', encoding='utf-8') as f:
                schema = json.load(f)

            validator_cls = jsonschema.validators.validator_for(schema)
            try:
                validator_cls.check_schema(schema)
            except jsonschema.SchemaError as e:
                self.logger.error(f"Invalid schema {filepath}: {e.message}")
                continue

            self.schemas[kind] = schema
            self._validators[kind] = validator_cls(schema)
            self.logger.debug(f"Loaded schema: {kind}")

    def validate(
        self,
        data: Dict[str, Any],
        kind: str
    ) -> Tuple[bool, List[str]]:
        """
        Validate a payload against its schema.

        Every violation is reported, ordered by location in the payload.

        Args:
            data: Payload to validate
            kind: Payload kind ('attempt', 'report' or 'export')

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        validator = self._validators.get(kind)
        if validator is None:
            return True, []  # No schema to validate against

        errors = [
            f"Validation error at {error.json_path}: {error.message}"
            for error in sorted(validator.iter_errors(data), key=lambda e: e.json_path)
        ]
        return not errors, errors

    def validate_batch(
        self,
        data_list: List[Dict[str, Any]],
        kind: str
    ) -> Tuple[int, int, List[Tuple[int, List[str]]]]:
        """
        Validate a list of payloads.

        Args:
            data_list: Payloads to validate
            kind: Payload kind

        Returns:
            Tuple of (valid_count, invalid_count, list of (index, errors))
        """
        valid_count = 0
        invalid_count = 0
        all_errors = []

        for i, data in enumerate(data_list):
            is_valid, errors = self.validate(data, kind)

            if is_valid:
                valid_count += 1
            else:
                invalid_count += 1
                all_errors.append((i, errors))

        return valid_count, invalid_count, all_errors
