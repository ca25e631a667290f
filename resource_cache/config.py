"""Configuration objects for resource-cache."""

from dataclasses import dataclass

from .names import SEPARATOR


@dataclass
class StoreConfig:
    """Configuration for the ResourceStore."""

    separator: str = SEPARATOR
    """Separator between the segments of a hierarchical resource name."""

    raise_callback_errors: bool = False
    """Propagate watch callback exceptions instead of logging them."""

    def __post_init__(self) -> None:
        if not self.separator:
            raise ValueError("StoreConfig separator must not be empty")
