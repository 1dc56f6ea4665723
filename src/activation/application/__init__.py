"""Application layer for automatic profile activation."""

from src.activation.application.dispatcher import ActivationDispatcher
from src.activation.application.rule_evaluator import REGEX_SIZE_LIMIT, RuleEvaluator

__all__ = ["ActivationDispatcher", "RuleEvaluator", "REGEX_SIZE_LIMIT"]
