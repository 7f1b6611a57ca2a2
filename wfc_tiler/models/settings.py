import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core.collapse import POLICIES


@dataclass
class SolveSettings:
    """
    Parameters for a generation run.
    """
    width: int = 8                        # grid width in cells
    height: int = 8                       # grid height in cells
    policy: str = 'random'                # 'lowest', 'random' or 'weighted'
    seed: Optional[int] = None            # base seed for random policies
    max_attempts: int = 10                # restarts after a contradiction
    max_steps: Optional[int] = None       # collapse-step cap per attempt

    def validate(self) -> None:
        """Raise ValueError if any setting is out of range."""
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Grid size must be positive, got {self.width}x{self.height}")
        if self.policy not in POLICIES:
            raise ValueError(f"Unknown policy '{self.policy}', expected one of {POLICIES}")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.max_steps is not None and self.max_steps < 1:
            raise ValueError("max_steps must be at least 1")

    def to_dict(self) -> dict:
        return {
            'width': self.width,
            'height': self.height,
            'policy': self.policy,
            'seed': self.seed,
            'max_attempts': self.max_attempts,
            'max_steps': self.max_steps
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SolveSettings':
        return cls(
            width=data.get('width', 8),
            height=data.get('height', 8),
            policy=data.get('policy', 'random'),
            seed=data.get('seed'),
            max_attempts=data.get('max_attempts', 10),
            max_steps=data.get('max_steps')
        )

    @classmethod
    def load(cls, filepath: str) -> 'SolveSettings':
        """Read settings from a JSON file."""
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {filepath}")
        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid settings file: {e}")
        if not isinstance(data, dict):
            raise ValueError("Invalid settings file: expected a JSON object")
        return cls.from_dict(data)
