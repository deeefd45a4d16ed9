# Application Stats Package
from .learning_stats import calculate_learning_stats
from .metrics_tracker import LearningMetricsTracker

__all__ = ["LearningMetricsTracker", "calculate_learning_stats"]
