"""
Pacing policy: request jitter and browser identity rotation.

Randomness is confined here so it can be switched off in tests.
"""
import asyncio
import random
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from .config import ScraperConfig, USER_AGENTS


@dataclass(frozen=True)
class Identity:
    """What a browsing context presents to the remote site."""

    user_agent: str
    viewport: Dict[str, int]


class PacingPolicy:
    def __init__(
        self,
        jitter_ms: Tuple[int, int] = (0, 0),
        user_agents: Sequence[str] = USER_AGENTS,
        viewport_width: Tuple[int, int] = (1280, 1600),
        viewport_height: Tuple[int, int] = (800, 1000),
        rng: Optional[random.Random] = None,
    ) -> None:
        if not user_agents:
            raise ValueError("user_agents must not be empty")
        lo, hi = jitter_ms
        self.jitter_ms = (max(0, lo), max(0, lo, hi))
        self.user_agents = tuple(user_agents)
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        self.rng = rng or random.Random()

    @classmethod
    def from_config(cls, config: ScraperConfig, rng: Optional[random.Random] = None) -> "PacingPolicy":
        return cls(
            jitter_ms=(config.jitter_min_ms, config.jitter_max_ms),
            user_agents=config.user_agents,
            viewport_width=config.viewport_width,
            viewport_height=config.viewport_height,
            rng=rng,
        )

    @classmethod
    def disabled(cls, user_agent: str = USER_AGENTS[0]) -> "PacingPolicy":
        """No jitter, one fixed identity."""
        return cls(
            jitter_ms=(0, 0),
            user_agents=(user_agent,),
            viewport_width=(1280, 1280),
            viewport_height=(900, 900),
            rng=random.Random(0),
        )

    def next_delay(self) -> float:
        """Seconds to wait before the next navigation."""
        lo, hi = self.jitter_ms
        if hi <= 0:
            return 0.0
        return self.rng.randint(lo, hi) / 1000.0

    async def jitter(self) -> float:
        delay = self.next_delay()
        if delay > 0:
            await asyncio.sleep(delay)
        return delay

    def pick_identity(self) -> Identity:
        return Identity(
            user_agent=self.rng.choice(self.user_agents),
            viewport={
                "width": self.rng.randint(*self.viewport_width),
                "height": self.rng.randint(*self.viewport_height),
            },
        )
