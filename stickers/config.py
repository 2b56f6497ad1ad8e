"""
Slicing configuration and validation.
"""

from dataclasses import asdict, dataclass

DEFAULT_ALPHA_THRESHOLD = 15
DEFAULT_MIN_DIMENSION = 20
DEFAULT_PADDING = 2


class InvalidConfig(ValueError):
    """Raised when a slicing configuration is out of range."""


@dataclass(frozen=True)
class SliceConfig:
    """
    Parameters for one slicing run.

    Attributes:
        alpha_threshold: Minimum alpha (1-255) for a pixel to count as opaque
        min_dimension: Minimum raw width and height of a kept component
        padding: Margin added on every side before clipping
    """

    alpha_threshold: int = DEFAULT_ALPHA_THRESHOLD
    min_dimension: int = DEFAULT_MIN_DIMENSION
    padding: int = DEFAULT_PADDING

    def validate(self) -> 'SliceConfig':
        """
        Check every field and return self.

        Raises:
            InvalidConfig: If any value is not an integer or out of range
        """
        for name in ('alpha_threshold', 'min_dimension', 'padding'):
            value = getattr(self, name)
            # bool is an int subclass but never a meaningful setting here
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfig(f"{name} must be an integer, got {value!r}")

        if not 1 <= self.alpha_threshold <= 255:
            raise InvalidConfig(
                f"alpha_threshold must be in [1, 255], got {self.alpha_threshold}")
        if self.min_dimension < 0:
            raise InvalidConfig(
                f"min_dimension must be >= 0, got {self.min_dimension}")
        if self.padding < 0:
            raise InvalidConfig(f"padding must be >= 0, got {self.padding}")

        return self

    @classmethod
    def from_dict(cls, data: dict) -> 'SliceConfig':
        """Build a validated config from a dict, ignoring unknown keys."""
        known = {k: data[k] for k in ('alpha_threshold', 'min_dimension', 'padding')
                 if k in data}
        return cls(**known).validate()

    def to_dict(self) -> dict:
        return asdict(self)
