"""Utility helpers used across dumpreport.

Small, self-contained helpers that do not depend on the data model.
"""

from dumpreport.utils.yaml_utils import normalize_yaml_dict_keys

__all__ = ["normalize_yaml_dict_keys"]
