"""
HLF Proximity run errors
"""


class HlfRunError(Exception):
    """Raised when a run cannot continue at all."""

    def __init__(self, stage: str, message: str):
        self.stage = stage
        super().__init__(f"[{stage}] {message}")
