from orplan.transform.transformer import Transformer, transform

__all__ = ["Transformer", "transform"]
