"""Three-card reveal driven by a fixed timeline of phases."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..cues import Cue
from ..modes import Visualization
from .base import Simulator
from .scheduler import Scheduler

DECK_SIZE = 3
REVEAL_POSITION = 1


class CardPhase(str, Enum):
    IDLE = "idle"
    SHUFFLING = "shuffling"
    PICKING = "picking"
    REVEALED = "revealed"


@dataclass(frozen=True)
class CardView:
    """How one card of the deck is drawn.

    ``face`` is only set on the reveal position once the card is turned.
    ``motion`` names the idle animation played while shuffling.
    """

    position: int
    visible: bool
    emphasized: bool
    face: Optional[str] = None
    motion: Optional[str] = None


@dataclass(frozen=True)
class CardFrame:
    elapsed_ms: float
    phase: CardPhase
    cards: tuple[CardView, ...]


def deck_view(
    phase: CardPhase,
    winner_name: Optional[str],
    *,
    deck_size: int = DECK_SIZE,
    reveal_position: int = REVEAL_POSITION,
) -> tuple[CardView, ...]:
    """Card layout for ``phase``."""
    cards = []
    for position in range(deck_size):
        chosen = position == reveal_position
        if phase is CardPhase.SHUFFLING:
            cards.append(
                CardView(
                    position=position,
                    visible=True,
                    emphasized=False,
                    motion="pulse" if position % 2 == 0 else "bounce",
                )
            )
        elif phase in (CardPhase.PICKING, CardPhase.REVEALED):
            cards.append(
                CardView(
                    position=position,
                    visible=chosen,
                    emphasized=chosen,
                    face=winner_name if chosen and phase is CardPhase.REVEALED else None,
                )
            )
        else:
            cards.append(CardView(position=position, visible=True, emphasized=False))
    return tuple(cards)


class CardRevealSimulator(Simulator):
    """Shuffle, pick the centre card, then turn it over to show the winner.

    Phase changes are timers measured from the start of the session:
    picking at ``pick_at_ms``, reveal at ``reveal_at_ms`` and completion at
    ``done_at_ms``.
    """

    kind = Visualization.CARD

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        pick_at_ms: float = 2000.0,
        reveal_at_ms: float = 3000.0,
        done_at_ms: float = 5000.0,
        **kwargs: Any,
    ) -> None:
        super().__init__(scheduler, **kwargs)
        if not 0 <= pick_at_ms <= reveal_at_ms <= done_at_ms:
            raise ValueError("card timeline must be ordered pick <= reveal <= done")
        self.pick_at_ms = pick_at_ms
        self.reveal_at_ms = reveal_at_ms
        self.done_at_ms = done_at_ms
        self._phase = CardPhase.IDLE

    @property
    def phase(self) -> CardPhase:
        return self._phase

    def cancel(self) -> bool:
        cancelled = super().cancel()
        if cancelled:
            self._phase = CardPhase.IDLE
        return cancelled

    def _show(self, phase: CardPhase) -> None:
        self._phase = phase
        self._emit(
            CardFrame(
                elapsed_ms=self._elapsed(),
                phase=phase,
                cards=deck_view(phase, self.winner_name),
            )
        )

    def _begin(self) -> None:
        self._show(CardPhase.SHUFFLING)
        self._after(self.pick_at_ms, lambda: self._show(CardPhase.PICKING))
        self._after(self.reveal_at_ms, self._reveal)
        self._after(self.done_at_ms, self._finish)

    def _reveal(self) -> None:
        self._conclude()
        self._cue(Cue.CARD_REVEALED)
        self._show(CardPhase.REVEALED)


__all__ = [
    "CardFrame",
    "CardPhase",
    "CardRevealSimulator",
    "CardView",
    "DECK_SIZE",
    "REVEAL_POSITION",
    "deck_view",
]
