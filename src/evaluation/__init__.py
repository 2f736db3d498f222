from src.evaluation.environment import Environment
from src.evaluation.evaluator import Evaluator, evaluate

__all__ = ["Environment", "Evaluator", "evaluate"]
