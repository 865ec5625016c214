"""
Configuration management for the bilirubin calculator
"""

import os
from pathlib import Path
from typing import Dict, Any

from dotenv import load_dotenv


# Base paths
BASE_DIR = Path(__file__).parent.parent.parent

load_dotenv(BASE_DIR / ".env")


class Config:
    """Main configuration class for the bilirubin calculator"""

    def __init__(self):
        # Recommendation rules
        self.calculator_config = {
            'default_bilirubin': float(os.getenv('DEFAULT_BILIRUBIN', '8.0')),  # mg/dL, used before first entry
            'guideline_min_age_hours': 24,
            'escalation_offset': 2.0,  # mg/dL below the exchange threshold
            'default_gestational_age': 38,  # weeks
            'default_risk_factors': True,
        }

        # Numeric input fields (range clamping only, no plausibility checks)
        self.input_config = {
            'bilirubin': {'min': 1.0, 'max': 28.0, 'step': 0.1, 'is_float': True, 'start_value': 8.0},
            'hour': {'min': 0, 'max': 23, 'step': 1, 'is_float': False, 'start_value': 0},
            'localized_digits': os.getenv('LOCALIZED_DIGITS', 'true').lower() == 'true',
        }

        # HTTP backend
        self.api_config = {
            'host': os.getenv('API_HOST', '0.0.0.0'),
            'port': int(os.getenv('API_PORT', '8000')),
            'cors_origins': ["http://localhost:5173", "http://localhost:3000"],
        }

        # Logging
        self.logging_config = {
            'level': os.getenv('LOG_LEVEL', 'INFO'),
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        }

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get configuration for a named section"""
        config_map = {
            'calculator': self.calculator_config,
            'input': self.input_config,
            'api': self.api_config,
            'logging': self.logging_config,
        }
        return config_map.get(section.lower(), {})

    def update_config(self, section: str, updates: Dict[str, Any]) -> None:
        """Update a configuration section"""
        if hasattr(self, f'{section}_config'):
            config = getattr(self, f'{section}_config')
            config.update(updates)
        else:
            raise ValueError(f"Unknown configuration section: {section}")


# Global configuration instance
config = Config()
