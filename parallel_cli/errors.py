"""Error taxonomy for the orchestrator."""


class ParallelCliError(Exception):
    """Base class for errors that halt a run or a report."""


class ConfigInvalidError(ParallelCliError):
    """Raised when the resolved run configuration is malformed."""


class PresetNotFoundError(ConfigInvalidError):
    """Raised when a requested preset does not exist in the settings."""


class EmptyResultSetError(ParallelCliError):
    """Raised when spec discovery finds no spec files for the selected suites."""


class ResultsDirectoryMissingError(ParallelCliError):
    """Raised when results are requested but no run has produced any."""


class RunnerNotFoundError(ParallelCliError):
    """Raised when a test runner is not registered."""
