"""
provcat - LLM provider catalog ingestion

Fetches the models.dev provider catalog and normalizes it into canonical
provider and model records.

Quick Start:
    pip install -e .
    provcat list
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
