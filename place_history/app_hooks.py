from typing import Protocol


class AppHooks(Protocol):
    """
    Protocol for application hooks used by long-running place validation.

    The host application implements these to show progress and to let the
    user stop a validation run.
    """
    def report_step(self, info: str = "", target: int = None, reset_counter: bool = False, plus_step: int = 1) -> None:
        """
        Report progress of the validation run.

        Args:
            info (str): Progress message.
            target (int): Total number of steps, when starting a new phase.
            reset_counter (bool): Start counting from zero.
            plus_step (int): Number of steps completed since the last report.
        """
        pass

    def stop_requested(self) -> bool:
        """
        Check if a stop has been requested by the user.

        Returns:
            bool: True if stop is requested, False otherwise.
        """
        return False

    def update_key_value(self, key: str, value) -> None:
        """
        Report a status update with a key-value pair, e.g. issues found so far.

        Args:
            key (str): Status key.
            value: Status value.
        """
        pass
