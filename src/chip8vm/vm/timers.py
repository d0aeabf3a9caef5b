"""
Delay and sound timers.

Both are 8-bit counters that count down to zero at 60 Hz. The host loop
decides when a 60 Hz period has elapsed; this module only decrements.
"""

from dataclasses import dataclass


TIMER_FREQ = 60.0


@dataclass
class Timers:
    """
    The delay and sound timer registers.

    Attributes:
        delay: Delay timer, read by Fx07 and set by Fx15
        sound: Sound timer, set by Fx18; a tone plays while it is nonzero
    """
    delay: int = 0
    sound: int = 0

    def tick(self) -> bool:
        """
        Decrement both timers by one, stopping at zero.

        Returns:
            True if the tone should still be sounding
        """
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1
        return self.sound > 0

    @property
    def tone(self) -> bool:
        """True while the sound timer is running."""
        return self.sound > 0

    def reset(self) -> None:
        self.delay = 0
        self.sound = 0
