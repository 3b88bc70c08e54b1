# paircorr/models/__init__.py
from .rolling import rolling_relationships_joblib, align_pair

__all__ = ["rolling_relationships_joblib", "align_pair"]
