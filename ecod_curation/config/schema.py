#!/usr/bin/env python3
"""
Configuration schema definition for validation
"""
from typing import Dict, Any, List

NUMBER = (int, float)


class ConfigSchema:
    """Configuration schema for validation"""

    SCHEMA = {
        'database': {
            'host': {'type': str, 'required': True},
            'port': {'type': int, 'required': True},
            'database': {'type': str, 'required': True},
            'user': {'type': str, 'required': True},
            'password': {'type': str, 'required': False},
        },
        'analysis': {
            'min_alignment_length': {'type': int, 'required': False},
            'coverage_threshold': {'type': NUMBER, 'required': False},
            'fragment_coverage': {'type': NUMBER, 'required': False},
            'poor_coverage': {'type': NUMBER, 'required': False},
            'blast_evalue_cutoff': {'type': NUMBER, 'required': False},
            'blast_strong_evalue': {'type': NUMBER, 'required': False},
            'hhsearch_low_probability': {'type': NUMBER, 'required': False},
            'hhsearch_good_probability': {'type': NUMBER, 'required': False},
            'hhsearch_evalue_cutoff': {'type': NUMBER, 'required': False},
            'primary_overlap': {'type': NUMBER, 'required': False},
            'supporting_overlap': {'type': NUMBER, 'required': False},
            'boundary_overlap': {'type': NUMBER, 'required': False},
            'boundary_window': {'type': int, 'required': False},
            'near_window': {'type': int, 'required': False},
            'min_domain_length': {'type': int, 'required': False},
            'source_match_bonus': {'type': NUMBER, 'required': False},
        },
        'logging': {
            'level': {'type': str, 'required': False},
            'format': {'type': str, 'required': False},
            'log_dir': {'type': str, 'required': False},
        },
    }

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> List[str]:
        """Validate configuration against schema

        Args:
            config: Configuration to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        for section, fields in cls.SCHEMA.items():
            if section not in config:
                if any(props.get('required', False) for props in fields.values()):
                    errors.append(f"Missing required configuration section: {section}")
                continue

            section_config = config[section]
            if not isinstance(section_config, dict):
                errors.append(f"Configuration section {section} must be a mapping")
                continue

            for field, props in fields.items():
                if field not in section_config:
                    if props.get('required', False):
                        errors.append(f"Missing required configuration field: {section}.{field}")
                    continue

                expected_type = props.get('type')
                value = section_config[field]
                # bool is an int subclass but never a valid threshold
                if expected_type and (isinstance(value, bool) or not isinstance(value, expected_type)):
                    type_name = (expected_type.__name__ if isinstance(expected_type, type)
                                 else "number")
                    errors.append(
                        f"Invalid type for {section}.{field}: expected {type_name}, "
                        f"got {type(value).__name__}"
                    )

        return errors
