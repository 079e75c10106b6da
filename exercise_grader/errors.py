"""
Error types shared across the grader

Setup problems (missing inputs, bad configuration) are fatal and raise
ConfigurationError. Problems with a single message never raise; they end up
as explanations on that message's grade.
"""


class ConfigurationError(ValueError):
    """Missing, empty or invalid setup input; aborts the run"""
