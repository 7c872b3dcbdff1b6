#!/usr/bin/env python3
"""
ECOD Curation Configuration Module
"""
from .manager import ConfigManager
from .schema import ConfigSchema
from .defaults import DEFAULT_CONFIG

__all__ = ['ConfigManager', 'ConfigSchema', 'DEFAULT_CONFIG']
